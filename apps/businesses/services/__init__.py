"""Services for businesses, shops, collectors and shop policies."""

from .shop_management import (
    get_business_shops,
    create_shop,
    set_shop_active,
    delete_shop,
)
from .collector_management import (
    get_shop_collectors,
    create_debt_collector,
    toggle_debt_collector,
    delete_debt_collector,
)
from .policy_management import (
    get_shop_policy,
    upsert_shop_policy,
    validate_policy_values,
)

__all__ = [
    'get_business_shops',
    'create_shop',
    'set_shop_active',
    'delete_shop',
    'get_shop_collectors',
    'create_debt_collector',
    'toggle_debt_collector',
    'delete_debt_collector',
    'get_shop_policy',
    'upsert_shop_policy',
    'validate_policy_values',
]
