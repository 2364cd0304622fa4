"""Product catalogue management for shop admins."""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError

from apps.accounts.models import User
from apps.audit.services import record_audit
from apps.businesses.models import Shop
from apps.purchases.money import quantize_money

from .exceptions import DuplicateSkuError, InvalidProductDataError, ProductNotFoundError
from .models import Product

logger = logging.getLogger(__name__)


def get_shop_product(*, shop: Shop, product_id: UUID) -> Product:
    try:
        return Product.objects.get(id=product_id, shop=shop)
    except Product.DoesNotExist:
        raise ProductNotFoundError()


def _clean(shop: Shop, name: str, price: Decimal, sku: Optional[str], exclude_id: Optional[UUID] = None):
    name = (name or '').strip()
    if not name:
        raise InvalidProductDataError('Product name is required')
    if price is None or price < 0:
        raise InvalidProductDataError('Price must be 0 or more')

    sku = (sku or '').strip() or None
    if sku:
        duplicates = Product.objects.filter(shop=shop, sku=sku)
        if exclude_id:
            duplicates = duplicates.exclude(id=exclude_id)
        if duplicates.exists():
            raise DuplicateSkuError()
    return name, quantize_money(price), sku


@transaction.atomic
def create_product(
    *,
    shop: Shop,
    actor: User,
    name: str,
    price: Decimal,
    sku: Optional[str] = None,
    description: str = '',
    image_url: str = '',
) -> Product:
    name, price, sku = _clean(shop, name, price, sku)
    try:
        product = Product.objects.create(
            shop=shop,
            name=name,
            price=price,
            sku=sku,
            description=description or '',
            image_url=image_url or '',
        )
    except IntegrityError:
        raise DuplicateSkuError()

    record_audit(
        actor=actor,
        action='PRODUCT_CREATED',
        entity_type='Product',
        entity_id=product.id,
        metadata={'shop_id': shop.id, 'name': product.name, 'price': product.price},
    )
    logger.info("Product %s created in shop %s", product.name, shop.shop_slug)
    return product


@transaction.atomic
def update_product(
    *,
    shop: Shop,
    actor: User,
    product_id: UUID,
    name: str,
    price: Decimal,
    sku: Optional[str] = None,
    description: str = '',
    image_url: str = '',
    is_active: Optional[bool] = None,
) -> Product:
    product = get_shop_product(shop=shop, product_id=product_id)
    name, price, sku = _clean(shop, name, price, sku, exclude_id=product.id)

    previous_price = product.price
    product.name = name
    product.price = price
    product.sku = sku
    product.description = description or ''
    product.image_url = image_url or ''
    if is_active is not None:
        product.is_active = is_active
    try:
        product.save()
    except IntegrityError:
        raise DuplicateSkuError()

    record_audit(
        actor=actor,
        action='PRODUCT_UPDATED',
        entity_type='Product',
        entity_id=product.id,
        metadata={'shop_id': shop.id, 'name': product.name, 'previous_price': previous_price, 'price': price},
    )
    return product


@transaction.atomic
def toggle_product(*, shop: Shop, actor: User, product_id: UUID) -> Product:
    product = get_shop_product(shop=shop, product_id=product_id)
    product.is_active = not product.is_active
    product.save(update_fields=['is_active', 'updated_at'])

    record_audit(
        actor=actor,
        action='PRODUCT_ACTIVATED' if product.is_active else 'PRODUCT_DEACTIVATED',
        entity_type='Product',
        entity_id=product.id,
        metadata={'shop_id': shop.id},
    )
    return product


@transaction.atomic
def delete_product(*, shop: Shop, actor: User, product_id: UUID) -> None:
    """Delete a product. Existing purchase items keep their snapshot."""
    product = get_shop_product(shop=shop, product_id=product_id)
    name = product.name
    deleted_id = product.id
    product.delete()

    record_audit(
        actor=actor,
        action='PRODUCT_DELETED',
        entity_type='Product',
        entity_id=deleted_id,
        metadata={'shop_id': shop.id, 'name': name},
    )
    logger.info("Product %s deleted from shop %s", name, shop.shop_slug)
