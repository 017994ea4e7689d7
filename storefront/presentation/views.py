"""
Views da API REST: orquestram a validação dos DTOs, a execução dos casos
de uso e a serialização da resposta.
"""
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, OpenApiResponse
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from storefront.core import dependency_injection as di
from storefront.core.entities import Role
from storefront.core.exceptions import PermissionDeniedError
from storefront.infrastructure.mappers import UserMapper

from .permissions import public, roles
from .serializers import (
    page_payload,
    UserQuerySerializer, CreateUserSerializer, UpdateUserSerializer, UserResponseSerializer,
    CategorySerializer, CategoryQuerySerializer, ColorSerializer, VariantSerializer,
    ProductSerializer, ProductVariantSerializer, ProductQuerySerializer,
    PriceRuleSerializer, PriceRuleQuerySerializer,
    PriceQuerySerializer, PriceResolutionSerializer,
    CreateOrderSerializer, UpdateOrderSerializer, ChangeOrderStatusSerializer, OrderQuerySerializer,
    OrderResponseSerializer, StatusHistoryEntrySerializer,
    PayPalCreateSerializer, PayPalResultSerializer, WebhookAckSerializer, HealthSerializer,
)

ADMIN = Role.ADMIN.value


def current_user(request):
    """Entidade do Core correspondente ao usuário autenticado."""
    return UserMapper.to_entity(request.user)


def validated(serializer_class, data, **kwargs):
    serializer = serializer_class(data=data, **kwargs)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


# ====================================================================
# 1. SAÚDE
# ====================================================================

@public
class HealthView(APIView):
    """GET/HEAD /health."""
    authentication_classes = []

    @extend_schema(tags=['Health'], summary='Health check', responses=HealthSerializer)
    def get(self, request):
        return Response(di.get_health_check_use_case().execute())


# ====================================================================
# 2. USUÁRIOS
# ====================================================================

class UserListCreateView(APIView):

    @roles(ADMIN)
    @extend_schema(
        tags=['Users'], summary='List users',
        parameters=[UserQuerySerializer], responses=UserResponseSerializer(many=True),
    )
    def get(self, request):
        query = validated(UserQuerySerializer, request.query_params)
        filters = {key: query.get(key) for key in ('email', 'phone_number', 'role')}
        page = di.get_manage_users_use_case().list(
            filters=filters,
            page=query['page'],
            limit=query['limit'],
            sort_by=query['sort_by'],
            sort_order=query['sort_order'],
        )
        return Response(page_payload(page, UserResponseSerializer))

    @roles(ADMIN)
    @extend_schema(tags=['Users'], summary='Create user', request=CreateUserSerializer,
                   responses={201: UserResponseSerializer})
    def post(self, request):
        data = validated(CreateUserSerializer, request.data)
        user = di.get_manage_users_use_case().create(data)
        return Response(UserResponseSerializer(user).data, status=status.HTTP_201_CREATED)


class UserMeView(APIView):

    @extend_schema(tags=['Users'], summary='Current user profile', responses=UserResponseSerializer)
    def get(self, request):
        user = di.get_manage_users_use_case().get(str(request.user.id))
        return Response(UserResponseSerializer(user).data)


class UserDetailView(APIView):

    @extend_schema(tags=['Users'], summary='Get user', responses=UserResponseSerializer)
    def get(self, request, user_id):
        actor = current_user(request)
        if not actor.is_admin and actor.id != str(user_id):
            raise PermissionDeniedError("You can only access your own profile.")
        user = di.get_manage_users_use_case().get(str(user_id))
        return Response(UserResponseSerializer(user).data)

    @roles(ADMIN)
    @extend_schema(tags=['Users'], summary='Update user', request=UpdateUserSerializer,
                   responses=UserResponseSerializer)
    def patch(self, request, user_id):
        data = validated(UpdateUserSerializer, request.data)
        user = di.get_manage_users_use_case().update(str(user_id), data)
        return Response(UserResponseSerializer(user).data)

    @roles(ADMIN)
    @extend_schema(tags=['Users'], summary='Delete user', responses={204: None})
    def delete(self, request, user_id):
        di.get_manage_users_use_case().delete(str(user_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


# ====================================================================
# 3. CATÁLOGO: CATEGORIAS, CORES E VARIAÇÕES
# Leitura pública; escrita restrita a administradores.
# ====================================================================

class CategoryListCreateView(APIView):

    @public
    @extend_schema(tags=['Categories'], summary='List categories',
                   parameters=[CategoryQuerySerializer], responses=CategorySerializer(many=True))
    def get(self, request):
        query = validated(CategoryQuerySerializer, request.query_params)
        categories = di.get_manage_categories_use_case().list(status=query.get('status'))
        return Response(CategorySerializer(categories, many=True).data)

    @roles(ADMIN)
    @extend_schema(tags=['Categories'], summary='Create category', request=CategorySerializer,
                   responses={201: CategorySerializer, 409: OpenApiResponse(description='Slug already exists')})
    def post(self, request):
        data = validated(CategorySerializer, request.data)
        category = di.get_manage_categories_use_case().create(data)
        return Response(CategorySerializer(category).data, status=status.HTTP_201_CREATED)


class CategoryDetailView(APIView):

    @public
    @extend_schema(tags=['Categories'], summary='Get category', responses=CategorySerializer)
    def get(self, request, category_id):
        category = di.get_manage_categories_use_case().get(str(category_id))
        return Response(CategorySerializer(category).data)

    @roles(ADMIN)
    @extend_schema(tags=['Categories'], summary='Update category', request=CategorySerializer,
                   responses=CategorySerializer)
    def patch(self, request, category_id):
        data = validated(CategorySerializer, request.data, partial=True)
        category = di.get_manage_categories_use_case().update(str(category_id), data)
        return Response(CategorySerializer(category).data)

    @roles(ADMIN)
    @extend_schema(tags=['Categories'], summary='Delete category', responses={204: None})
    def delete(self, request, category_id):
        di.get_manage_categories_use_case().delete(str(category_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


class ColorListCreateView(APIView):

    @public
    @extend_schema(tags=['Colors'], summary='List colors', responses=ColorSerializer(many=True))
    def get(self, request):
        colors = di.get_manage_colors_use_case().list()
        return Response(ColorSerializer(colors, many=True).data)

    @roles(ADMIN)
    @extend_schema(tags=['Colors'], summary='Create color', request=ColorSerializer,
                   responses={201: ColorSerializer})
    def post(self, request):
        data = validated(ColorSerializer, request.data)
        color = di.get_manage_colors_use_case().create(data)
        return Response(ColorSerializer(color).data, status=status.HTTP_201_CREATED)


class ColorDetailView(APIView):

    @public
    @extend_schema(tags=['Colors'], summary='Get color', responses=ColorSerializer)
    def get(self, request, color_id):
        return Response(ColorSerializer(di.get_manage_colors_use_case().get(str(color_id))).data)

    @roles(ADMIN)
    @extend_schema(tags=['Colors'], summary='Update color', request=ColorSerializer, responses=ColorSerializer)
    def patch(self, request, color_id):
        data = validated(ColorSerializer, request.data, partial=True)
        color = di.get_manage_colors_use_case().update(str(color_id), data)
        return Response(ColorSerializer(color).data)

    @roles(ADMIN)
    @extend_schema(tags=['Colors'], summary='Delete color', responses={204: None})
    def delete(self, request, color_id):
        di.get_manage_colors_use_case().delete(str(color_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


class VariantListCreateView(APIView):

    @public
    @extend_schema(tags=['Variants'], summary='List variants', responses=VariantSerializer(many=True))
    def get(self, request):
        variants = di.get_manage_variants_use_case().list()
        return Response(VariantSerializer(variants, many=True).data)

    @roles(ADMIN)
    @extend_schema(tags=['Variants'], summary='Create variant', request=VariantSerializer,
                   responses={201: VariantSerializer})
    def post(self, request):
        data = validated(VariantSerializer, request.data)
        variant = di.get_manage_variants_use_case().create(data)
        return Response(VariantSerializer(variant).data, status=status.HTTP_201_CREATED)


class VariantDetailView(APIView):

    @public
    @extend_schema(tags=['Variants'], summary='Get variant', responses=VariantSerializer)
    def get(self, request, variant_id):
        return Response(VariantSerializer(di.get_manage_variants_use_case().get(str(variant_id))).data)

    @roles(ADMIN)
    @extend_schema(tags=['Variants'], summary='Update variant', request=VariantSerializer,
                   responses=VariantSerializer)
    def patch(self, request, variant_id):
        data = validated(VariantSerializer, request.data, partial=True)
        variant = di.get_manage_variants_use_case().update(str(variant_id), data)
        return Response(VariantSerializer(variant).data)

    @roles(ADMIN)
    @extend_schema(tags=['Variants'], summary='Delete variant', responses={204: None})
    def delete(self, request, variant_id):
        di.get_manage_variants_use_case().delete(str(variant_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


# ====================================================================
# 4. PRODUTOS E REGRAS DE PREÇO
# ====================================================================

class ProductListCreateView(APIView):

    @public
    @extend_schema(tags=['Products'], summary='List products',
                   parameters=[ProductQuerySerializer], responses=ProductSerializer(many=True))
    def get(self, request):
        query = validated(ProductQuerySerializer, request.query_params)
        filters = {
            'search': query.get('search'),
            'category_id': query.get('category_id'),
            'is_featured': query.get('is_featured'),
        }
        page = di.get_manage_products_use_case().list(
            filters=filters,
            page=query['page'],
            limit=query['limit'],
            sort_by=query['sort_by'],
            sort_order=query['sort_order'],
        )
        return Response(page_payload(page, ProductSerializer))

    @roles(ADMIN)
    @extend_schema(tags=['Products'], summary='Create product', request=ProductSerializer,
                   responses={201: ProductSerializer})
    def post(self, request):
        data = validated(ProductSerializer, request.data)
        product = di.get_manage_products_use_case().create(data)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)


class ProductDetailView(APIView):

    @public
    @extend_schema(tags=['Products'], summary='Get product', responses=ProductSerializer)
    def get(self, request, product_id):
        product = di.get_manage_products_use_case().get(str(product_id))
        return Response(ProductSerializer(product).data)

    @roles(ADMIN)
    @extend_schema(tags=['Products'], summary='Update product', request=ProductSerializer,
                   responses=ProductSerializer)
    def patch(self, request, product_id):
        data = validated(ProductSerializer, request.data, partial=True)
        # A lista de variações substitui a atual, então cada item é validado por completo.
        if data.get('variants') is not None:
            data['variants'] = validated(ProductVariantSerializer, request.data['variants'], many=True)
        product = di.get_manage_products_use_case().update(str(product_id), data)
        return Response(ProductSerializer(product).data)

    @roles(ADMIN)
    @extend_schema(tags=['Products'], summary='Delete product', responses={204: None})
    def delete(self, request, product_id):
        di.get_manage_products_use_case().delete(str(product_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


class ProductPriceView(APIView):

    @public
    @extend_schema(tags=['Products'], summary='Resolve current price',
                   parameters=[PriceQuerySerializer], responses=PriceResolutionSerializer)
    def get(self, request, product_id):
        query = validated(PriceQuerySerializer, request.query_params)
        variant_id = query.get('variant_id')
        result = di.get_resolve_price_use_case().execute(
            str(product_id),
            variant_id=str(variant_id) if variant_id else None,
            moment=query.get('at'),
        )
        return Response(PriceResolutionSerializer(result).data)


@roles(ADMIN)
class PriceRuleListCreateView(APIView):

    @extend_schema(tags=['Price rules'], summary='List price rules',
                   parameters=[PriceRuleQuerySerializer], responses=PriceRuleSerializer(many=True))
    def get(self, request):
        query = validated(PriceRuleQuerySerializer, request.query_params)
        rules = di.get_manage_price_rules_use_case().list(
            product_id=str(query['product_id']) if query.get('product_id') else None,
            variant_id=str(query['variant_id']) if query.get('variant_id') else None,
        )
        return Response(PriceRuleSerializer(rules, many=True).data)

    @extend_schema(tags=['Price rules'], summary='Create price rule', request=PriceRuleSerializer,
                   responses={201: PriceRuleSerializer})
    def post(self, request):
        data = validated(PriceRuleSerializer, request.data)
        rule = di.get_manage_price_rules_use_case().create(data)
        return Response(PriceRuleSerializer(rule).data, status=status.HTTP_201_CREATED)


@roles(ADMIN)
class PriceRuleDetailView(APIView):

    @extend_schema(tags=['Price rules'], summary='Delete price rule', responses={204: None})
    def delete(self, request, rule_id):
        di.get_manage_price_rules_use_case().delete(str(rule_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


# ====================================================================
# 5. PEDIDOS
# ====================================================================

class OrderListCreateView(APIView):

    @extend_schema(tags=['Orders'], summary='List orders (admins see all, users their own)',
                   parameters=[OrderQuerySerializer], responses=OrderResponseSerializer(many=True))
    def get(self, request):
        query = validated(OrderQuerySerializer, request.query_params)
        page = di.get_manage_orders_use_case().list(
            current_user(request),
            page=query['page'],
            limit=query['limit'],
            status=query.get('status'),
            user_id=str(query['user_id']) if query.get('user_id') else None,
        )
        return Response(page_payload(page, OrderResponseSerializer))

    @extend_schema(tags=['Orders'], summary='Create order', request=CreateOrderSerializer,
                   responses={201: OrderResponseSerializer})
    def post(self, request):
        data = validated(CreateOrderSerializer, request.data)
        actor = current_user(request)

        # Apenas administradores criam pedidos em nome de outro usuário.
        user_id = actor.id
        if data.get('user_id') and actor.is_admin:
            user_id = str(data['user_id'])

        order = di.get_create_order_use_case().execute(
            user_id=user_id,
            items=data['items'],
            shipping_address=dict(data['shipping_address']),
            payment_info=data.get('payment_info'),
            created_by=actor.id,
        )
        return Response(OrderResponseSerializer(order).data, status=status.HTTP_201_CREATED)


class MyOrdersView(APIView):

    @extend_schema(tags=['Orders'], summary="Current user's orders",
                   parameters=[OrderQuerySerializer], responses=OrderResponseSerializer(many=True))
    def get(self, request):
        query = validated(OrderQuerySerializer, request.query_params)
        page = di.get_manage_orders_use_case().list_own(
            current_user(request), page=query['page'], limit=query['limit'], status=query.get('status'),
        )
        return Response(page_payload(page, OrderResponseSerializer))


class OrderDetailView(APIView):

    @extend_schema(tags=['Orders'], summary='Get order', responses=OrderResponseSerializer)
    def get(self, request, order_id):
        order = di.get_manage_orders_use_case().get(str(order_id), current_user(request))
        return Response(OrderResponseSerializer(order).data)

    @roles(ADMIN)
    @extend_schema(tags=['Orders'], summary='Update order', request=UpdateOrderSerializer,
                   responses=OrderResponseSerializer)
    def patch(self, request, order_id):
        data = dict(validated(UpdateOrderSerializer, request.data))
        if 'shipping_address' in data:
            data['shipping_address'] = dict(data['shipping_address'])
        order = di.get_manage_orders_use_case().update(str(order_id), data, current_user(request))
        return Response(OrderResponseSerializer(order).data)

    @roles(ADMIN)
    @extend_schema(tags=['Orders'], summary='Delete order', responses={204: None})
    def delete(self, request, order_id):
        di.get_manage_orders_use_case().delete(str(order_id), current_user(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class OrderStatusView(APIView):

    @roles(ADMIN)
    @extend_schema(tags=['Orders'], summary='Change order status', request=ChangeOrderStatusSerializer,
                   responses=OrderResponseSerializer)
    def post(self, request, order_id):
        data = validated(ChangeOrderStatusSerializer, request.data)
        order = di.get_manage_orders_use_case().change_status(
            str(order_id), data['status'], current_user(request), note=data.get('note') or None,
        )
        return Response(OrderResponseSerializer(order).data)


class OrderStatusHistoryView(APIView):

    @extend_schema(tags=['Orders'], summary='Order status history with durations',
                   responses=StatusHistoryEntrySerializer(many=True))
    def get(self, request, order_id):
        history = di.get_manage_orders_use_case().status_history(str(order_id), current_user(request))
        return Response(StatusHistoryEntrySerializer(history, many=True).data)


# ====================================================================
# 6. PAGAMENTOS (PayPal)
# ====================================================================

class PayPalCreateOrderView(APIView):

    @extend_schema(tags=['Payments'], summary='Create PayPal order', request=PayPalCreateSerializer,
                   responses=PayPalResultSerializer)
    def post(self, request):
        data = validated(PayPalCreateSerializer, request.data)
        result = di.get_payments_use_case().create_paypal_order(dict(data))
        return Response(PayPalResultSerializer(result).data)


class PayPalCaptureOrderView(APIView):

    @extend_schema(tags=['Payments'], summary='Capture PayPal order', request=None,
                   responses=PayPalResultSerializer)
    def post(self, request, order_id):
        result = di.get_payments_use_case().capture_paypal_order(order_id)
        return Response(PayPalResultSerializer(result).data)


@public
class PayPalWebhookView(APIView):
    """Recebe notificações do PayPal. Eventos repetidos (mesmo id) são ignorados."""
    authentication_classes = []

    @extend_schema(tags=['Payments'], summary='PayPal webhook', request=OpenApiTypes.OBJECT,
                   responses=WebhookAckSerializer)
    def post(self, request):
        payload = request.data if isinstance(request.data, dict) else {}
        result = di.get_payments_use_case().handle_webhook(dict(payload))
        return Response(WebhookAckSerializer(result).data)
