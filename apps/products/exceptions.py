"""Domain exceptions for the products app."""
from rest_framework.exceptions import APIException


class ProductNotFoundError(APIException):
    status_code = 404
    default_detail = 'Product not found'
    default_code = 'product_not_found'


class InvalidProductDataError(APIException):
    status_code = 400
    default_detail = 'Invalid product details'
    default_code = 'invalid_product_data'


class DuplicateSkuError(APIException):
    status_code = 400
    default_detail = 'A product with this SKU already exists'
    default_code = 'duplicate_sku'
