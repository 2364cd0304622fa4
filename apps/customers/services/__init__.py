"""Services for customer records."""

from .customer_management import (
    normalize_phone,
    get_shop_customer,
    customers_with_summary,
    create_customer,
    update_customer,
    toggle_customer,
    delete_customer,
)
from .collector_customers import (
    collector_customers,
    collector_customers_with_summary,
    get_collector_customer,
    create_collector_customer,
)

__all__ = [
    'normalize_phone',
    'get_shop_customer',
    'customers_with_summary',
    'create_customer',
    'update_customer',
    'toggle_customer',
    'delete_customer',
    'collector_customers',
    'collector_customers_with_summary',
    'get_collector_customer',
    'create_collector_customer',
]
