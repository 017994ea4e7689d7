# Configuração da interface administrativa do Django para os modelos do Storefront.

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from storefront.infrastructure.models import User
from storefront.catalog.models import Category, Color, Variant, Product, ProductVariant, ProductPriceRule
from storefront.orders.models import Order
from storefront.payments.models import PaymentEvent


# ====================================================================
# 1. USUÁRIOS (login por e-mail, sem username/first_name/last_name)
# ====================================================================

@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('email', 'phone_number', 'role', 'is_staff', 'is_active', 'created_at')
    list_filter = ('role', 'is_staff', 'is_active')
    search_fields = ('email', 'phone_number')
    ordering = ('-created_at',)

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Perfil', {'fields': ('phone_number', 'role', 'profile')}),
        ('Permissões', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Datas', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'phone_number', 'role', 'password1', 'password2'),
        }),
    )


# ====================================================================
# 2. CATÁLOGO
# ====================================================================

@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('name', 'slug')


@admin.register(Color)
class ColorAdmin(admin.ModelAdmin):
    list_display = ('name', 'hex_code', 'image_url')
    search_fields = ('name',)


@admin.register(Variant)
class VariantAdmin(admin.ModelAdmin):
    list_display = ('name', 'created_at')
    search_fields = ('name',)


class ProductVariantInline(admin.TabularInline):
    """Permite editar as variações diretamente na página do produto."""
    model = ProductVariant
    extra = 1
    fields = ('sku', 'color', 'variant', 'price', 'sale_price', 'quantity', 'is_available')


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('product_code', 'category', 'quantity', 'is_featured', 'created_at')
    list_filter = ('category', 'is_featured')
    search_fields = ('product_code', 'product_sku', 'description')
    inlines = [ProductVariantInline]


@admin.register(ProductPriceRule)
class ProductPriceRuleAdmin(admin.ModelAdmin):
    list_display = ('type', 'value', 'product_id', 'variant_id', 'priority', 'start_at', 'end_at')
    list_filter = ('type',)


# ====================================================================
# 3. PEDIDOS E PAGAMENTOS
# ====================================================================

@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'status', 'total', 'created_at')
    list_filter = ('status', 'created_at')
    search_fields = ('id', 'user__email')
    readonly_fields = ('tracking_history', 'created_at', 'updated_at')


@admin.register(PaymentEvent)
class PaymentEventAdmin(admin.ModelAdmin):
    list_display = ('event_id', 'event_type', 'order_id', 'resource_status', 'created_at')
    search_fields = ('event_id', 'order_id')
    readonly_fields = ('raw_data', 'created_at')
