"""Services for purchases, payments and the confirmation workflow."""

from .pricing import (
    PurchaseQuote,
    calculate_interest,
    quote_purchase,
)
from .purchase_management import (
    shop_purchases,
    get_shop_purchase,
    customer_purchases,
    next_purchase_number,
    create_purchase,
    create_collector_sale,
)
from .payment_recording import (
    ensure_payable,
    record_payment,
    record_collector_payment,
)
from .payment_confirmation import (
    shop_payments,
    shop_pending_payments,
    collector_payments,
    collector_pending_payments,
    collector_payment_history,
    confirm_payment,
    reject_payment,
)
from .overdue import find_overdue_purchases, mark_overdue_purchases
from .receipts import get_payment_receipt
from .exports import (
    EXPORT_STATES,
    business_payments,
    business_purchases,
    export_filename,
    export_payments_csv,
    export_purchases_csv,
    export_customers_csv,
    export_products_csv,
    write_payments_csv,
)

__all__ = [
    'PurchaseQuote',
    'calculate_interest',
    'quote_purchase',
    'shop_purchases',
    'get_shop_purchase',
    'customer_purchases',
    'next_purchase_number',
    'create_purchase',
    'create_collector_sale',
    'ensure_payable',
    'record_payment',
    'record_collector_payment',
    'shop_payments',
    'shop_pending_payments',
    'collector_payments',
    'collector_pending_payments',
    'collector_payment_history',
    'confirm_payment',
    'reject_payment',
    'find_overdue_purchases',
    'mark_overdue_purchases',
    'get_payment_receipt',
    'EXPORT_STATES',
    'business_payments',
    'business_purchases',
    'export_filename',
    'export_payments_csv',
    'export_purchases_csv',
    'export_customers_csv',
    'export_products_csv',
    'write_payments_csv',
]
