"""
Define as rotas da API REST: saúde, autenticação, usuários, catálogo,
pedidos e pagamentos.
"""
from django.urls import path

from . import views, views_auth


urlpatterns = [
    # ====================================================================
    # 1. SAÚDE
    # ====================================================================
    path('health', views.HealthView.as_view(), name='health'),

    # ====================================================================
    # 2. AUTENTICAÇÃO
    # ====================================================================
    path('auth/register', views_auth.RegisterView.as_view(), name='auth-register'),
    path('auth/login', views_auth.LoginView.as_view(), name='auth-login'),
    path('auth/refresh', views_auth.RefreshView.as_view(), name='auth-refresh'),
    path('auth/logout', views_auth.LogoutView.as_view(), name='auth-logout'),

    # ====================================================================
    # 3. USUÁRIOS
    # ====================================================================
    path('users', views.UserListCreateView.as_view(), name='users'),
    path('users/me', views.UserMeView.as_view(), name='users-me'),
    path('users/<uuid:user_id>', views.UserDetailView.as_view(), name='user-detail'),

    # ====================================================================
    # 4. CATÁLOGO
    # ====================================================================
    path('categories', views.CategoryListCreateView.as_view(), name='categories'),
    path('categories/<uuid:category_id>', views.CategoryDetailView.as_view(), name='category-detail'),
    path('colors', views.ColorListCreateView.as_view(), name='colors'),
    path('colors/<uuid:color_id>', views.ColorDetailView.as_view(), name='color-detail'),
    path('variants', views.VariantListCreateView.as_view(), name='variants'),
    path('variants/<uuid:variant_id>', views.VariantDetailView.as_view(), name='variant-detail'),
    path('products', views.ProductListCreateView.as_view(), name='products'),
    path('products/<uuid:product_id>', views.ProductDetailView.as_view(), name='product-detail'),
    path('products/<uuid:product_id>/price', views.ProductPriceView.as_view(), name='product-price'),
    path('price-rules', views.PriceRuleListCreateView.as_view(), name='price-rules'),
    path('price-rules/<uuid:rule_id>', views.PriceRuleDetailView.as_view(), name='price-rule-detail'),

    # ====================================================================
    # 5. PEDIDOS
    # ====================================================================
    path('orders', views.OrderListCreateView.as_view(), name='orders'),
    path('orders/my-orders', views.MyOrdersView.as_view(), name='my-orders'),
    path('orders/<uuid:order_id>', views.OrderDetailView.as_view(), name='order-detail'),
    path('orders/<uuid:order_id>/status', views.OrderStatusView.as_view(), name='order-status'),
    path('orders/<uuid:order_id>/status-history', views.OrderStatusHistoryView.as_view(),
         name='order-status-history'),

    # ====================================================================
    # 6. PAGAMENTOS (PayPal)
    # ====================================================================
    path('payments/paypal/create', views.PayPalCreateOrderView.as_view(), name='paypal-create'),
    path('payments/paypal/capture/<str:order_id>', views.PayPalCaptureOrderView.as_view(),
         name='paypal-capture'),
    path('payments/paypal/webhook', views.PayPalWebhookView.as_view(), name='paypal-webhook'),
]
