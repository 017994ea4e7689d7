# storefront/core/dependency_injection.py
"""
Módulo de Injeção de Dependência (DI).
Responsável por instanciar os Use Cases com suas dependências de Repositórios/Gateways
concretos da camada de Infraestrutura.
"""
from storefront.infrastructure.repositories import (
    UserRepositoryDjango,
    CategoryRepositoryDjango,
    ColorRepositoryDjango,
    VariantRepositoryDjango,
    ProductRepositoryDjango,
    PriceRuleRepositoryDjango,
    OrderRepositoryDjango,
    PaymentEventRepositoryDjango,
)
from storefront.infrastructure.gateways import PayPalGatewayStub
from .use_cases import (
    ManageUsersUseCase,
    ManageCategoriesUseCase,
    ManageColorsUseCase,
    ManageVariantsUseCase,
    ManageProductsUseCase,
    ManagePriceRulesUseCase,
    ResolvePriceUseCase,
    CreateOrderUseCase,
    ManageOrdersUseCase,
    PaymentsUseCase,
    HealthCheckUseCase,
)

# Repositórios Concretos (sem estado; os modelos são resolvidos de forma lazy)
user_repo = UserRepositoryDjango()
category_repo = CategoryRepositoryDjango()
color_repo = ColorRepositoryDjango()
variant_repo = VariantRepositoryDjango()
product_repo = ProductRepositoryDjango()
price_rule_repo = PriceRuleRepositoryDjango()
order_repo = OrderRepositoryDjango()
payment_event_repo = PaymentEventRepositoryDjango()


# ====================================================================
# Use Cases de Usuários
# ====================================================================

def get_manage_users_use_case() -> ManageUsersUseCase:
    return ManageUsersUseCase(user_repo)


# ====================================================================
# Use Cases de Catálogo
# ====================================================================

def get_manage_categories_use_case() -> ManageCategoriesUseCase:
    return ManageCategoriesUseCase(category_repo)

def get_manage_colors_use_case() -> ManageColorsUseCase:
    return ManageColorsUseCase(color_repo)

def get_manage_variants_use_case() -> ManageVariantsUseCase:
    return ManageVariantsUseCase(variant_repo)

def get_manage_products_use_case() -> ManageProductsUseCase:
    return ManageProductsUseCase(product_repo, category_repo, color_repo, variant_repo)

def get_manage_price_rules_use_case() -> ManagePriceRulesUseCase:
    return ManagePriceRulesUseCase(price_rule_repo, product_repo)

def get_resolve_price_use_case() -> ResolvePriceUseCase:
    return ResolvePriceUseCase(product_repo, price_rule_repo)


# ====================================================================
# Use Cases de Pedidos e Pagamentos
# ====================================================================

def get_create_order_use_case() -> CreateOrderUseCase:
    return CreateOrderUseCase(order_repo, user_repo)

def get_manage_orders_use_case() -> ManageOrdersUseCase:
    return ManageOrdersUseCase(order_repo)

def get_payments_use_case() -> PaymentsUseCase:
    # O gateway é criado por requisição para refletir PAYPAL_MODE atual.
    return PaymentsUseCase(PayPalGatewayStub(), payment_event_repo)

def get_health_check_use_case() -> HealthCheckUseCase:
    return HealthCheckUseCase()
