from rest_framework import serializers
from .models import Customer, PaymentPreference


class CustomerSerializer(serializers.ModelSerializer):
    """Customer profile with the assigned collector's name."""

    full_name = serializers.CharField(read_only=True)
    assigned_collector_id = serializers.UUIDField(read_only=True, allow_null=True)
    assigned_collector_name = serializers.SerializerMethodField()

    class Meta:
        model = Customer
        fields = [
            'id',
            'first_name',
            'last_name',
            'full_name',
            'phone',
            'email',
            'id_type',
            'id_number',
            'address',
            'city',
            'region',
            'preferred_payment',
            'assigned_collector_id',
            'assigned_collector_name',
            'notes',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_assigned_collector_name(self, obj):
        if obj.assigned_collector_id is None:
            return None
        return obj.assigned_collector.user.get_display_name()


class CustomerSummarySerializer(CustomerSerializer):
    """Customer row annotated with purchase totals."""

    total_purchases = serializers.IntegerField(read_only=True)
    active_purchases = serializers.IntegerField(read_only=True)
    total_owed = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    total_paid = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta(CustomerSerializer.Meta):
        fields = CustomerSerializer.Meta.fields + [
            'total_purchases',
            'active_purchases',
            'total_owed',
            'total_paid',
        ]
        read_only_fields = fields


class CustomerInputSerializer(serializers.Serializer):
    """
    Create/update input for the shop admin.

    Required-field and uniqueness rules live in the service so both
    surfaces report the same messages.
    """

    first_name = serializers.CharField(max_length=100, allow_blank=True)
    last_name = serializers.CharField(max_length=100, allow_blank=True)
    phone = serializers.CharField(max_length=30, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True, default='')
    id_type = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    id_number = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    address = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    city = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    region = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    preferred_payment = serializers.ChoiceField(
        choices=PaymentPreference.choices,
        required=False,
        default=PaymentPreference.BOTH,
    )
    assigned_collector_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    is_active = serializers.BooleanField(required=False)


class CollectorCustomerInputSerializer(CustomerInputSerializer):
    """Collector variant: assignment is implicit, preference defaults to DEBT_COLLECTOR."""

    preferred_payment = serializers.ChoiceField(
        choices=PaymentPreference.choices,
        required=False,
        allow_null=True,
        default=None,
    )

    def get_fields(self):
        fields = super().get_fields()
        fields.pop('assigned_collector_id', None)
        fields.pop('is_active', None)
        return fields


class CustomerFilterSerializer(serializers.Serializer):
    """Query parameters for customer lists."""

    search = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False, allow_null=True, default=None)
    collector = serializers.UUIDField(required=False)
