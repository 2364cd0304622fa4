"""
Domain exceptions for the businesses app.

Raised by the business, shop and collector services and by the role
permission classes. The project exception handler renders them as
``{"success": false, "error": ...}``.
"""
from rest_framework.exceptions import APIException


class BusinessNotFoundError(APIException):
    status_code = 404
    default_detail = 'Business not found'
    default_code = 'business_not_found'


class ShopNotFoundError(APIException):
    status_code = 404
    default_detail = 'Shop not found'
    default_code = 'shop_not_found'


class ShopSuspendedError(APIException):
    status_code = 403
    default_detail = 'Shop is suspended'
    default_code = 'shop_suspended'


class InvalidShopDataError(APIException):
    """Shop name or slug failed validation."""
    status_code = 400
    default_detail = 'Invalid shop details'
    default_code = 'invalid_shop_data'


class ShopSlugTakenError(APIException):
    status_code = 400
    default_detail = 'This shop slug is already taken'
    default_code = 'shop_slug_taken'


class InvalidStaffDataError(APIException):
    """New shop admin or collector account failed validation."""
    status_code = 400
    default_detail = 'Invalid staff details'
    default_code = 'invalid_staff_data'


class AlreadyShopMemberError(APIException):
    status_code = 400
    default_detail = 'This user is already a member of your shop'
    default_code = 'already_shop_member'


class CollectorNotFoundError(APIException):
    status_code = 404
    default_detail = 'Debt collector not found'
    default_code = 'collector_not_found'


class InvalidPolicyError(APIException):
    status_code = 400
    default_detail = 'Invalid shop policy'
    default_code = 'invalid_policy'
