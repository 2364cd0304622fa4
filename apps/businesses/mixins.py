class ShopScopedMixin:
    """
    View mixin for endpoints under ``<shop_slug>``.

    ``shop`` and ``membership`` are filled in by the role permission classes
    before the handler runs.
    """

    shop = None
    membership = None

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['shop'] = self.shop
        context['membership'] = self.membership
        return context


class BusinessScopedMixin:
    """View mixin for endpoints under ``<business_slug>``."""

    business = None


# Router lookup for UUID primary keys; malformed ids 404 at the URL layer
UUID_PATTERN = '[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'
