"""Domain exceptions for the customers app."""
from rest_framework.exceptions import APIException


class CustomerNotFoundError(APIException):
    status_code = 404
    default_detail = 'Customer not found'
    default_code = 'customer_not_found'


class InvalidCustomerDataError(APIException):
    """Required customer field missing or malformed."""
    status_code = 400
    default_detail = 'Invalid customer details'
    default_code = 'invalid_customer_data'


class DuplicatePhoneError(APIException):
    status_code = 400
    default_detail = 'A customer with this phone number already exists'
    default_code = 'duplicate_phone'


class InvalidCollectorError(APIException):
    status_code = 400
    default_detail = 'Invalid debt collector selected'
    default_code = 'invalid_collector'
