"""Shop credit policy."""

import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction

from apps.accounts.models import User
from apps.audit.services import record_audit
from apps.businesses.exceptions import InvalidPolicyError
from apps.businesses.models import InterestType, Shop, ShopPolicy

logger = logging.getLogger(__name__)

POLICY_FIELDS = [
    'interest_type',
    'interest_rate',
    'grace_days',
    'max_tenor_days',
    'late_fee_fixed',
    'late_fee_rate',
]


def get_shop_policy(*, shop: Shop) -> ShopPolicy:
    """
    Return the shop's policy.

    Shops without a stored policy get an unsaved ShopPolicy carrying the
    model defaults (flat 0%, 3 grace days, 60 day tenor, no late fees).
    """
    try:
        return shop.policy
    except ShopPolicy.DoesNotExist:
        return ShopPolicy(shop=shop)


def _policy_snapshot(policy: ShopPolicy) -> dict:
    return {field: getattr(policy, field) for field in POLICY_FIELDS}


def validate_policy_values(
    *,
    interest_type: str,
    interest_rate: Decimal,
    grace_days: int,
    max_tenor_days: int,
    late_fee_fixed: Optional[Decimal] = None,
    late_fee_rate: Optional[Decimal] = None,
) -> None:
    """Raise InvalidPolicyError when any value is outside the allowed range."""
    if interest_type not in InterestType.values:
        raise InvalidPolicyError('Interest type must be FLAT or MONTHLY')
    if interest_rate < 0 or interest_rate > 100:
        raise InvalidPolicyError('Interest rate must be between 0 and 100')
    if grace_days < 0 or grace_days > 60:
        raise InvalidPolicyError('Grace days must be between 0 and 60')
    if max_tenor_days < 1 or max_tenor_days > 365:
        raise InvalidPolicyError('Max tenor days must be between 1 and 365')
    if late_fee_fixed is not None and late_fee_fixed < 0:
        raise InvalidPolicyError('Late fee cannot be negative')
    if late_fee_rate is not None and late_fee_rate < 0:
        raise InvalidPolicyError('Late fee rate cannot be negative')


@transaction.atomic
def upsert_shop_policy(
    *,
    shop: Shop,
    actor: User,
    interest_type: str,
    interest_rate: Decimal,
    grace_days: int,
    max_tenor_days: int,
    late_fee_fixed: Optional[Decimal] = None,
    late_fee_rate: Optional[Decimal] = None,
) -> ShopPolicy:
    """Create or replace the shop's policy and audit the previous values."""
    values = {
        'interest_type': interest_type,
        'interest_rate': interest_rate,
        'grace_days': grace_days,
        'max_tenor_days': max_tenor_days,
        'late_fee_fixed': late_fee_fixed,
        'late_fee_rate': late_fee_rate,
    }
    validate_policy_values(**values)

    policy = ShopPolicy.objects.select_for_update().filter(shop=shop).first()
    previous = _policy_snapshot(policy) if policy else None

    if policy is None:
        policy = ShopPolicy.objects.create(shop=shop, **values)
    else:
        for field, value in values.items():
            setattr(policy, field, value)
        policy.save()

    record_audit(
        actor=actor,
        action='POLICY_UPDATED',
        entity_type='ShopPolicy',
        entity_id=policy.id,
        metadata={'shop_id': shop.id, 'previous': previous, 'current': values},
    )
    logger.info("Policy updated for shop %s: %s%% %s", shop.shop_slug, interest_rate, interest_type)
    return policy
