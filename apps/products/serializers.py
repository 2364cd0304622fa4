from rest_framework import serializers
from .models import Product


class ProductSerializer(serializers.ModelSerializer):

    class Meta:
        model = Product
        fields = [
            'id',
            'name',
            'description',
            'sku',
            'price',
            'image_url',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ProductInputSerializer(serializers.Serializer):
    """Create/update input. Name and price rules are enforced by the service."""

    name = serializers.CharField(max_length=200, allow_blank=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    sku = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    image_url = serializers.URLField(max_length=500, required=False, allow_blank=True, default='')
    is_active = serializers.BooleanField(required=False)


class ProductFilterSerializer(serializers.Serializer):
    """Query parameters for product lists."""

    search = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False, allow_null=True, default=None)
