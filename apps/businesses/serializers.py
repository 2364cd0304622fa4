from rest_framework import serializers
from .models import InterestType, ShopMember, ShopPolicy


# =============================================================================
# Shops (business admin)
# =============================================================================

class ShopSummarySerializer(serializers.Serializer):
    """Row of the business admin shop list."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    shop_slug = serializers.CharField()
    country = serializers.CharField()
    is_active = serializers.BooleanField()
    created_at = serializers.DateTimeField()
    product_count = serializers.IntegerField()
    customer_count = serializers.IntegerField()
    admin_name = serializers.CharField(allow_null=True)
    admin_email = serializers.EmailField(allow_null=True)


class ShopCreateSerializer(serializers.Serializer):
    """Input for creating a shop with an optional shop admin."""

    name = serializers.CharField(max_length=200)
    shop_slug = serializers.CharField(max_length=100)
    country = serializers.CharField(max_length=100, required=False, allow_blank=True)
    admin_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    admin_email = serializers.CharField(max_length=255, required=False, allow_blank=True)
    admin_password = serializers.CharField(
        required=False,
        allow_blank=True,
        write_only=True,
        trim_whitespace=False,
    )

    def validate(self, attrs):
        if attrs.get('admin_email') and not attrs.get('admin_password'):
            raise serializers.ValidationError({
                'admin_password': 'Password is required when creating a shop admin'
            })
        return attrs


class ShopActiveSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()


# =============================================================================
# Collectors (shop admin)
# =============================================================================

class CollectorSerializer(serializers.ModelSerializer):
    """Collector membership with the account details."""

    user_id = serializers.UUIDField(source='user.id', read_only=True)
    name = serializers.CharField(source='user.get_display_name', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    phone = serializers.CharField(source='user.phone', read_only=True)
    assigned_customer_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = ShopMember
        fields = [
            'id',
            'user_id',
            'name',
            'email',
            'phone',
            'role',
            'is_active',
            'assigned_customer_count',
            'created_at',
        ]
        read_only_fields = fields


class CollectorCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.CharField(max_length=255)
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)


# =============================================================================
# Shop policy
# =============================================================================

class ShopPolicySerializer(serializers.ModelSerializer):
    """Shop policy; also used for the defaults of shops without one."""

    is_default = serializers.SerializerMethodField()

    class Meta:
        model = ShopPolicy
        fields = [
            'interest_type',
            'interest_rate',
            'grace_days',
            'max_tenor_days',
            'late_fee_fixed',
            'late_fee_rate',
            'is_default',
            'updated_at',
        ]
        read_only_fields = fields

    def get_is_default(self, obj):
        return obj._state.adding


class ShopPolicyInputSerializer(serializers.Serializer):
    """Policy update input. Range checks live in the policy service."""

    interest_type = serializers.ChoiceField(choices=InterestType.choices, default=InterestType.FLAT)
    interest_rate = serializers.DecimalField(max_digits=5, decimal_places=2)
    grace_days = serializers.IntegerField()
    max_tenor_days = serializers.IntegerField()
    late_fee_fixed = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True, default=None
    )
    late_fee_rate = serializers.DecimalField(
        max_digits=5, decimal_places=2, required=False, allow_null=True, default=None
    )
