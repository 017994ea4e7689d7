"""
Serializers (DTOs) da API: validam a entrada antes dos casos de uso e
formatam as entidades do Core na saída.
"""
from rest_framework import serializers

from storefront.core.entities import Role, CategoryStatus, OrderStatus, PriceRuleType
from storefront.core.use_cases import USER_SORT_FIELDS, PRODUCT_SORT_FIELDS, SORT_ORDERS, MAX_PAGE_LIMIT

ROLE_CHOICES = [role.value for role in Role]
CATEGORY_STATUS_CHOICES = [s.value for s in CategoryStatus]
ORDER_STATUS_CHOICES = OrderStatus.values()
PRICE_RULE_TYPE_CHOICES = [t.value for t in PriceRuleType]

MONEY_REGEX = r'^\d+\.\d{2}$'
HEX_COLOR_REGEX = r'^#[0-9A-Fa-f]{6}$'


# ====================================================================
# PAGINAÇÃO
# ====================================================================

class PaginationSerializer(serializers.Serializer):
    """page >= 1; 1 <= limit <= 100."""
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=MAX_PAGE_LIMIT, default=10)


class PageMetaSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    limit = serializers.IntegerField()
    total_pages = serializers.IntegerField()


def page_payload(page, item_serializer_class):
    """Monta {items, meta} a partir de um Page do Core."""
    return {
        'items': item_serializer_class(page.items, many=True).data,
        'meta': PageMetaSerializer(page).data,
    }


# ====================================================================
# SERIALIZERS DE USUÁRIO E AUTENTICAÇÃO
# ====================================================================

class UserQuerySerializer(PaginationSerializer):
    email = serializers.CharField(required=False)
    phone_number = serializers.CharField(required=False)
    role = serializers.ChoiceField(choices=ROLE_CHOICES, required=False)
    sort_by = serializers.ChoiceField(choices=USER_SORT_FIELDS, default='created_at')
    sort_order = serializers.ChoiceField(choices=SORT_ORDERS, default='DESC')


class CreateUserSerializer(serializers.Serializer):
    email = serializers.EmailField()
    phone_number = serializers.CharField(max_length=20)
    password = serializers.CharField(min_length=6, max_length=128, write_only=True)
    role = serializers.ChoiceField(choices=ROLE_CHOICES)
    profile = serializers.CharField(required=False, allow_blank=True)


class UpdateUserSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False)
    phone_number = serializers.CharField(max_length=20, required=False)
    password = serializers.CharField(min_length=6, max_length=128, write_only=True, required=False)
    role = serializers.ChoiceField(choices=ROLE_CHOICES, required=False)
    profile = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=8, max_length=128, write_only=True)
    phone_number = serializers.CharField(max_length=20)
    profile = serializers.CharField(required=False, allow_blank=True)


class UserResponseSerializer(serializers.Serializer):
    id = serializers.CharField()
    email = serializers.EmailField()
    phone_number = serializers.CharField()
    role = serializers.CharField()
    profile = serializers.CharField()
    is_active = serializers.BooleanField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class TokenPairSerializer(serializers.Serializer):
    access = serializers.CharField()
    refresh = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    user = UserResponseSerializer()
    tokens = TokenPairSerializer()


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()


# ====================================================================
# SERIALIZERS DO CATÁLOGO
# ====================================================================

class CategorySerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    name = serializers.CharField(max_length=255)
    slug = serializers.SlugField(max_length=255, required=False)
    status = serializers.ChoiceField(choices=CATEGORY_STATUS_CHOICES, required=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class CategoryQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=CATEGORY_STATUS_CHOICES, required=False)


class ColorSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    name = serializers.CharField(max_length=100)
    hex_code = serializers.RegexField(
        HEX_COLOR_REGEX, required=False, allow_null=True,
        error_messages={'invalid': 'hex_code must match #RRGGBB.'},
    )
    image_url = serializers.URLField(max_length=500, required=False, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class VariantSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    name = serializers.CharField(max_length=100)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class ProductVariantSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    sku = serializers.CharField(max_length=100)
    color_id = serializers.UUIDField(required=False, allow_null=True)
    variant_id = serializers.UUIDField(required=False, allow_null=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    sale_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True)
    quantity = serializers.IntegerField(min_value=0, required=False)
    image_url = serializers.URLField(max_length=500, required=False, allow_null=True)
    is_available = serializers.BooleanField(required=False)
    attributes = serializers.DictField(required=False)

    def validate(self, attrs):
        sale_price = attrs.get('sale_price')
        price = attrs.get('price')
        if sale_price is not None and price is not None and sale_price > price:
            raise serializers.ValidationError({'sale_price': 'sale_price cannot be greater than price.'})
        return attrs


class ProductSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    product_code = serializers.CharField(max_length=100)
    product_sku = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)
    category_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=0, required=False)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    images = serializers.ListField(child=serializers.URLField(max_length=500), required=False)
    is_featured = serializers.BooleanField(required=False)
    variants = ProductVariantSerializer(many=True, required=False)
    min_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class ProductQuerySerializer(PaginationSerializer):
    search = serializers.CharField(required=False)
    category_id = serializers.UUIDField(required=False)
    # Sem default=None, um BooleanField ausente na query string vira False.
    is_featured = serializers.BooleanField(required=False, allow_null=True, default=None)
    sort_by = serializers.ChoiceField(choices=PRODUCT_SORT_FIELDS, default='created_at')
    sort_order = serializers.ChoiceField(choices=SORT_ORDERS, default='DESC')


class PriceRuleSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    product_id = serializers.UUIDField(required=False, allow_null=True)
    variant_id = serializers.UUIDField(required=False, allow_null=True)
    type = serializers.ChoiceField(choices=PRICE_RULE_TYPE_CHOICES, required=False)
    value = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    start_at = serializers.DateTimeField(required=False, allow_null=True)
    end_at = serializers.DateTimeField(required=False, allow_null=True)
    priority = serializers.IntegerField(required=False)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)

    def validate(self, attrs):
        if bool(attrs.get('product_id')) == bool(attrs.get('variant_id')):
            raise serializers.ValidationError('Exactly one of product_id or variant_id must be provided.')
        start_at, end_at = attrs.get('start_at'), attrs.get('end_at')
        if start_at and end_at and end_at <= start_at:
            raise serializers.ValidationError({'end_at': 'end_at must be after start_at.'})
        if attrs.get('type', PriceRuleType.PERCENT.value) == PriceRuleType.PERCENT.value and attrs['value'] > 100:
            raise serializers.ValidationError({'value': 'A percent rule cannot exceed 100.'})
        return attrs


class PriceRuleQuerySerializer(serializers.Serializer):
    product_id = serializers.UUIDField(required=False)
    variant_id = serializers.UUIDField(required=False)


class PriceQuerySerializer(serializers.Serializer):
    variant_id = serializers.UUIDField(required=False)
    at = serializers.DateTimeField(required=False)


class PriceResolutionSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    variant_id = serializers.CharField(allow_null=True)
    base_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    final_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    rule = PriceRuleSerializer(allow_null=True)
    resolved_at = serializers.DateTimeField()


# ====================================================================
# SERIALIZERS DE PEDIDOS
# ====================================================================

class OrderItemSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    product_name = serializers.CharField(max_length=255)
    product_slug = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    variant_id = serializers.UUIDField(required=False, allow_null=True)
    variant_name = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    sku = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.RegexField(
        MONEY_REGEX,
        error_messages={'invalid': 'unit_price must be a decimal string with 2 places (e.g. "19.90").'},
    )
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)


class ShippingAddressSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=255)
    phone = serializers.CharField(max_length=20)
    address_line = serializers.CharField(max_length=500)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    district = serializers.CharField(max_length=100, required=False, allow_blank=True)
    ward = serializers.CharField(max_length=100, required=False, allow_blank=True)
    postal_code = serializers.CharField(max_length=20, required=False, allow_blank=True)


class CreateOrderSerializer(serializers.Serializer):
    user_id = serializers.UUIDField(required=False)
    items = OrderItemSerializer(many=True, allow_empty=False)
    shipping_address = ShippingAddressSerializer()
    payment_info = serializers.DictField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=ORDER_STATUS_CHOICES, required=False)

    def validate_status(self, value):
        if value != OrderStatus.PENDING.value:
            raise serializers.ValidationError('New orders must start as PENDING.')
        return value


class UpdateOrderSerializer(serializers.Serializer):
    shipping_address = ShippingAddressSerializer(required=False)
    payment_info = serializers.DictField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=ORDER_STATUS_CHOICES, required=False)
    note = serializers.CharField(max_length=500, required=False, allow_blank=True)


class ChangeOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ORDER_STATUS_CHOICES)
    note = serializers.CharField(max_length=500, required=False, allow_blank=True)


class OrderQuerySerializer(PaginationSerializer):
    status = serializers.ChoiceField(choices=ORDER_STATUS_CHOICES, required=False)
    user_id = serializers.UUIDField(required=False)


class TrackingEntrySerializer(serializers.Serializer):
    from_status = serializers.CharField(allow_null=True)
    to_status = serializers.CharField()
    changed_at = serializers.DateTimeField()
    changed_by = serializers.CharField(allow_null=True)
    note = serializers.CharField(allow_null=True)


class StatusHistoryEntrySerializer(TrackingEntrySerializer):
    duration_seconds = serializers.IntegerField()


class OrderResponseSerializer(serializers.Serializer):
    id = serializers.CharField()
    user_id = serializers.CharField()
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    status = serializers.CharField()
    items = OrderItemSerializer(many=True)
    shipping_address = serializers.JSONField()
    payment_info = serializers.JSONField()
    tracking_history = TrackingEntrySerializer(many=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


# ====================================================================
# SERIALIZERS DE PAGAMENTO E SAÚDE
# ====================================================================

class PayPalCreateSerializer(serializers.Serializer):
    order_id = serializers.UUIDField(required=False)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    currency = serializers.CharField(max_length=3, required=False)
    items = serializers.ListField(child=serializers.DictField(), required=False)


class PayPalResultSerializer(serializers.Serializer):
    id = serializers.CharField()
    status = serializers.CharField()


class WebhookAckSerializer(serializers.Serializer):
    received = serializers.BooleanField()
    duplicate = serializers.BooleanField()


class HealthSerializer(serializers.Serializer):
    status = serializers.CharField()
    timestamp = serializers.IntegerField()
