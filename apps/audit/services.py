"""Audit trail writer used by every state-changing service."""

import logging
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from .models import AuditLog

logger = logging.getLogger(__name__)


def _jsonable(value):
    """Convert Decimal, UUID and date values so metadata fits a JSONField."""
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_jsonable(v) for v in value]
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def record_audit(*, actor, action: str, entity_type: str, entity_id=None, metadata=None) -> AuditLog:
    """
    Store one audit entry.

    Args:
        actor: User performing the action (None for system jobs)
        action: Upper-case action code, e.g. PAYMENT_CONFIRMED
        entity_type: Model name the action applies to
        entity_id: Primary key of the affected row
        metadata: Extra context, converted to JSON-safe values

    Returns:
        Created AuditLog instance
    """
    entry = AuditLog.objects.create(
        actor=actor if getattr(actor, 'pk', None) else None,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else '',
        metadata=_jsonable(metadata or {}),
    )
    logger.debug("Audit %s on %s:%s", action, entity_type, entry.entity_id)
    return entry
