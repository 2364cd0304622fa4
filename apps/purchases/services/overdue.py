"""Overdue sweep for purchases past their due date and grace period."""

import logging
from datetime import date, timedelta
from typing import List, Optional

from django.db import transaction
from django.utils import timezone

from apps.audit.services import record_audit
from apps.businesses.services import get_shop_policy
from apps.purchases.models import Purchase, PurchaseStatus

logger = logging.getLogger(__name__)


def find_overdue_purchases(*, today: Optional[date] = None) -> List[Purchase]:
    """
    Open purchases whose ``due_date + grace_days`` lies before ``today``.

    Only PENDING and ACTIVE purchases with money still owed qualify; grace
    days come from each shop's policy (or its defaults).
    """
    today = today or timezone.localdate()
    candidates = (
        Purchase.objects
        .filter(
            status__in=[PurchaseStatus.PENDING, PurchaseStatus.ACTIVE],
            outstanding_balance__gt=0,
            due_date__lt=today,
        )
        .select_related('customer__shop')
        .order_by('due_date')
    )

    policies = {}
    overdue = []
    for purchase in candidates:
        shop = purchase.customer.shop
        if shop.id not in policies:
            policies[shop.id] = get_shop_policy(shop=shop)
        grace = timedelta(days=policies[shop.id].grace_days)
        if purchase.due_date + grace < today:
            overdue.append(purchase)
    return overdue


@transaction.atomic
def mark_overdue_purchases(*, today: Optional[date] = None, dry_run: bool = False) -> List[Purchase]:
    """
    Move qualifying purchases to OVERDUE.

    Returns:
        The purchases that were (or, with dry_run, would be) marked
    """
    overdue = find_overdue_purchases(today=today)
    if dry_run or not overdue:
        return overdue

    ids = [purchase.id for purchase in overdue]
    updated = Purchase.objects.filter(
        id__in=ids,
        status__in=[PurchaseStatus.PENDING, PurchaseStatus.ACTIVE],
    ).update(status=PurchaseStatus.OVERDUE, updated_at=timezone.now())

    record_audit(
        actor=None,
        action='PURCHASES_MARKED_OVERDUE',
        entity_type='Purchase',
        metadata={'count': updated, 'purchase_ids': ids},
    )
    logger.info("Marked %s purchase(s) overdue", updated)
    return overdue
