"""
Domain exceptions for purchases app.

This module defines the exception hierarchy for purchase and payment
errors. Every class is an APIException so services can raise them straight
through the views; the project exception handler turns them into
``{"success": false, "error": ...}`` responses.
"""
from rest_framework.exceptions import APIException


class PurchaseNotFoundError(APIException):
    """Purchase missing or outside the caller's scope."""
    status_code = 404
    default_detail = 'Purchase not found'
    default_code = 'purchase_not_found'


class PurchaseNotAccessibleError(APIException):
    """Collector tried to reach a purchase of a customer not assigned to them."""
    status_code = 404
    default_detail = 'Purchase not found or not accessible'
    default_code = 'purchase_not_accessible'


class InvalidPurchaseError(APIException):
    """Purchase input failed validation (items, installments, down payment)."""
    status_code = 400
    default_detail = 'Invalid purchase details'
    default_code = 'invalid_purchase'


class PurchaseAlreadyPaidError(APIException):
    status_code = 400
    default_detail = 'This purchase is already fully paid'
    default_code = 'purchase_already_paid'


class InvalidPaymentAmountError(APIException):
    status_code = 400
    default_detail = 'Payment amount must be greater than 0'
    default_code = 'invalid_payment_amount'


class PaymentExceedsOutstandingError(APIException):
    """Amount is larger than what is still owed on the purchase."""
    status_code = 400
    default_detail = 'Amount cannot exceed outstanding balance'
    default_code = 'payment_exceeds_outstanding'


class PaymentNotFoundError(APIException):
    status_code = 404
    default_detail = 'Payment not found'
    default_code = 'payment_not_found'


class PaymentAlreadyProcessedError(APIException):
    """Payment was already confirmed or rejected."""
    status_code = 400
    default_detail = 'Payment not found or already processed'
    default_code = 'payment_already_processed'


class RejectionReasonRequiredError(APIException):
    status_code = 400
    default_detail = 'A reason is required to reject a payment'
    default_code = 'rejection_reason_required'
