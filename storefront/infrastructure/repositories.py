"""
Camada de Infraestrutura: Implementação de Repositórios.

Esta camada traduz as operações abstratas definidas nas Portas da Core
em chamadas concretas ao Django ORM.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from django.apps import apps
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import ProtectedError, Q
from django.db.utils import IntegrityError

from storefront.core.entities import (
    User, Category, Color, Variant, Product, ProductVariant, ProductPriceRule,
    Order, PaymentEvent, Page
)
from storefront.core.ports import (
    IUserRepository,
    ICategoryRepository,
    IColorRepository,
    IVariantRepository,
    IProductRepository,
    IPriceRuleRepository,
    IOrderRepository,
    IPaymentEventRepository,
)
from storefront.core.exceptions import (
    ConflictError,
    EmailAlreadyInUseError,
    SlugAlreadyExistsError,
    UserNotFoundError,
    CategoryNotFoundError,
    ColorNotFoundError,
    VariantNotFoundError,
    ProductNotFoundError,
    PriceRuleNotFoundError,
    OrderNotFoundError,
)
from .mappers import (
    UserMapper, CategoryMapper, ColorMapper, VariantMapper, ProductMapper,
    ProductVariantMapper, PriceRuleMapper, OrderMapper, PaymentEventMapper
)

logger = logging.getLogger(__name__)

# Chaves inválidas (UUID malformado) são tratadas como "não encontrado".
LOOKUP_ERRORS = (ValidationError, ValueError)


# Helper para Lazy Loading
def get_model(app_label, model_name):
    """Busca o modelo Django de forma segura (Lazy Loading)."""
    return apps.get_model(app_label, model_name)


def paginate(queryset, page: int, limit: int, mapper) -> Page:
    """Fatia o queryset na página pedida e converte os itens em entidades."""
    total = queryset.count()
    offset = (page - 1) * limit
    items = [mapper(model) for model in queryset[offset:offset + limit]]
    return Page(items=items, total=total, page=page, limit=limit)


def order_by_clause(sort_by: str, sort_order: str) -> str:
    return f"-{sort_by}" if sort_order == 'DESC' else sort_by


def _get_or_none(model_class, **lookup):
    try:
        return model_class.objects.get(**lookup)
    except model_class.DoesNotExist:
        return None
    except LOOKUP_ERRORS:
        return None


# ====================================================================
# 1. USUÁRIOS
# ====================================================================

class UserRepositoryDjango(IUserRepository):
    """Implementação do UserRepository usando o Django ORM."""

    @property
    def UserModel(self):
        return get_model('infrastructure', 'User')

    def get_by_id(self, user_id: str) -> Optional[User]:
        return UserMapper.to_entity(_get_or_none(self.UserModel, pk=user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return UserMapper.to_entity(_get_or_none(self.UserModel, email__iexact=email))

    def list(self, filters: Dict[str, Any], page: int, limit: int, sort_by: str, sort_order: str) -> Page:
        qs = self.UserModel.objects.all()
        if filters.get('email'):
            qs = qs.filter(email__icontains=filters['email'])
        if filters.get('phone_number'):
            qs = qs.filter(phone_number__icontains=filters['phone_number'])
        if filters.get('role'):
            qs = qs.filter(role=filters['role'])
        qs = qs.order_by(order_by_clause(sort_by, sort_order))
        return paginate(qs, page, limit, UserMapper.to_entity)

    def save(self, user: User, password: Optional[str] = None) -> User:
        model = _get_or_none(self.UserModel, pk=user.id)
        is_new = model is None
        model = UserMapper.to_model(user, model)

        if password:
            model.set_password(password)
        elif is_new:
            model.set_unusable_password()

        try:
            with transaction.atomic():
                model.save()
        except IntegrityError:
            raise EmailAlreadyInUseError()
        return UserMapper.to_entity(model)

    def delete(self, user_id: str) -> None:
        deleted, _ = self.UserModel.objects.filter(pk=user_id).delete()
        if not deleted:
            raise UserNotFoundError()


# ====================================================================
# 2. CATÁLOGO
# ====================================================================

class CategoryRepositoryDjango(ICategoryRepository):

    @property
    def CategoryModel(self):
        return get_model('catalog', 'Category')

    def get_by_id(self, category_id: str) -> Optional[Category]:
        return CategoryMapper.to_entity(_get_or_none(self.CategoryModel, pk=category_id))

    def get_by_slug(self, slug: str) -> Optional[Category]:
        return CategoryMapper.to_entity(_get_or_none(self.CategoryModel, slug=slug))

    def list(self, status: Optional[str] = None) -> List[Category]:
        qs = self.CategoryModel.objects.all()
        if status:
            qs = qs.filter(status=status)
        return [CategoryMapper.to_entity(model) for model in qs]

    def save(self, category: Category) -> Category:
        model = CategoryMapper.to_model(category, _get_or_none(self.CategoryModel, pk=category.id))
        try:
            with transaction.atomic():
                model.save()
        except IntegrityError:
            raise SlugAlreadyExistsError()
        return CategoryMapper.to_entity(model)

    def delete(self, category_id: str) -> None:
        try:
            deleted, _ = self.CategoryModel.objects.filter(pk=category_id).delete()
        except ProtectedError:
            raise ConflictError("Category is in use by products and cannot be deleted.")
        if not deleted:
            raise CategoryNotFoundError()


class ColorRepositoryDjango(IColorRepository):

    @property
    def ColorModel(self):
        return get_model('catalog', 'Color')

    def get_by_id(self, color_id: str) -> Optional[Color]:
        return ColorMapper.to_entity(_get_or_none(self.ColorModel, pk=color_id))

    def get_by_name(self, name: str) -> Optional[Color]:
        return ColorMapper.to_entity(_get_or_none(self.ColorModel, name__iexact=name))

    def list(self) -> List[Color]:
        return [ColorMapper.to_entity(model) for model in self.ColorModel.objects.all()]

    def save(self, color: Color) -> Color:
        model = ColorMapper.to_model(color, _get_or_none(self.ColorModel, pk=color.id))
        try:
            with transaction.atomic():
                model.save()
        except IntegrityError:
            raise ConflictError("Color name already exists.")
        return ColorMapper.to_entity(model)

    def delete(self, color_id: str) -> None:
        deleted, _ = self.ColorModel.objects.filter(pk=color_id).delete()
        if not deleted:
            raise ColorNotFoundError()


class VariantRepositoryDjango(IVariantRepository):

    @property
    def VariantModel(self):
        return get_model('catalog', 'Variant')

    def get_by_id(self, variant_id: str) -> Optional[Variant]:
        return VariantMapper.to_entity(_get_or_none(self.VariantModel, pk=variant_id))

    def get_by_name(self, name: str) -> Optional[Variant]:
        return VariantMapper.to_entity(_get_or_none(self.VariantModel, name__iexact=name))

    def list(self) -> List[Variant]:
        return [VariantMapper.to_entity(model) for model in self.VariantModel.objects.all()]

    def save(self, variant: Variant) -> Variant:
        model = VariantMapper.to_model(variant, _get_or_none(self.VariantModel, pk=variant.id))
        try:
            with transaction.atomic():
                model.save()
        except IntegrityError:
            raise ConflictError("Variant name already exists.")
        return VariantMapper.to_entity(model)

    def delete(self, variant_id: str) -> None:
        deleted, _ = self.VariantModel.objects.filter(pk=variant_id).delete()
        if not deleted:
            raise VariantNotFoundError()


class ProductRepositoryDjango(IProductRepository):
    """Produtos e suas variações vendáveis (product_variants)."""

    @property
    def ProductModel(self):
        return get_model('catalog', 'Product')

    @property
    def ProductVariantModel(self):
        return get_model('catalog', 'ProductVariant')

    @property
    def PriceRuleModel(self):
        return get_model('catalog', 'ProductPriceRule')

    def _queryset(self):
        return self.ProductModel.objects.select_related('category').prefetch_related('variants')

    def get_by_id(self, product_id: str) -> Optional[Product]:
        try:
            model = self._queryset().get(pk=product_id)
        except (self.ProductModel.DoesNotExist,) + LOOKUP_ERRORS:
            return None
        return ProductMapper.to_entity(model)

    def get_by_code(self, product_code: str) -> Optional[Product]:
        try:
            model = self._queryset().get(product_code=product_code)
        except self.ProductModel.DoesNotExist:
            return None
        return ProductMapper.to_entity(model)

    def get_variant(self, product_variant_id: str) -> Optional[ProductVariant]:
        return ProductVariantMapper.to_entity(_get_or_none(self.ProductVariantModel, pk=product_variant_id))

    def sku_exists(self, sku: str, exclude_product_id: Optional[str] = None) -> bool:
        qs = self.ProductVariantModel.objects.filter(sku=sku)
        if exclude_product_id:
            qs = qs.exclude(product_id=exclude_product_id)
        return qs.exists()

    def list(self, filters: Dict[str, Any], page: int, limit: int, sort_by: str, sort_order: str) -> Page:
        qs = self._queryset()
        if filters.get('search'):
            term = filters['search']
            qs = qs.filter(Q(product_code__icontains=term) | Q(description__icontains=term))
        if filters.get('category_id'):
            qs = qs.filter(category_id=filters['category_id'])
        if filters.get('is_featured') is not None:
            qs = qs.filter(is_featured=filters['is_featured'])
        qs = qs.order_by(order_by_clause(sort_by, sort_order))
        return paginate(qs, page, limit, ProductMapper.to_entity)

    @transaction.atomic
    def save(self, product: Product) -> Product:
        """
        Salva o produto e sincroniza as variações pelo SKU: as ausentes são
        removidas primeiro, depois as existentes são atualizadas (mantendo o
        id) e as novas criadas. Assim um SKU novo pode herdar a combinação
        cor/variação de um SKU retirado.
        """
        model = ProductMapper.to_model(product, _get_or_none(self.ProductModel, pk=product.id))
        try:
            with transaction.atomic():
                model.save()

                skus = [entity.sku for entity in product.variants]
                self.ProductVariantModel.objects.filter(product=model).exclude(sku__in=skus).delete()

                existing = {v.sku: v for v in self.ProductVariantModel.objects.filter(product=model)}
                for entity in product.variants:
                    variant_model = ProductVariantMapper.to_model(entity, model)
                    if entity.sku in existing:
                        variant_model.id = existing[entity.sku].id
                        variant_model.created_at = existing[entity.sku].created_at
                        variant_model._state.adding = False
                    variant_model.save()
        except IntegrityError as exc:
            logger.warning("Conflito ao salvar produto %s: %s", product.id, exc)
            raise ConflictError("Product code, SKU or color/variant combination already exists.")

        return ProductMapper.to_entity(self._queryset().get(pk=model.pk))

    @transaction.atomic
    def delete(self, product_id: str) -> None:
        try:
            model = self.ProductModel.objects.get(pk=product_id)
        except (self.ProductModel.DoesNotExist,) + LOOKUP_ERRORS:
            raise ProductNotFoundError()

        variant_ids = list(model.variants.values_list('id', flat=True))
        self.PriceRuleModel.objects.filter(Q(product_id=model.id) | Q(variant_id__in=variant_ids)).delete()
        model.delete()


class PriceRuleRepositoryDjango(IPriceRuleRepository):

    @property
    def PriceRuleModel(self):
        return get_model('catalog', 'ProductPriceRule')

    def get_by_id(self, rule_id: str) -> Optional[ProductPriceRule]:
        return PriceRuleMapper.to_entity(_get_or_none(self.PriceRuleModel, pk=rule_id))

    def list(self, product_id: Optional[str] = None, variant_id: Optional[str] = None) -> List[ProductPriceRule]:
        qs = self.PriceRuleModel.objects.all()
        if product_id:
            qs = qs.filter(product_id=product_id)
        if variant_id:
            qs = qs.filter(variant_id=variant_id)
        return [PriceRuleMapper.to_entity(model) for model in qs]

    def find_for_target(self, product_id: str, variant_id: Optional[str] = None) -> List[ProductPriceRule]:
        condition = Q(product_id=product_id)
        if variant_id:
            condition |= Q(variant_id=variant_id)
        return [PriceRuleMapper.to_entity(model) for model in self.PriceRuleModel.objects.filter(condition)]

    def save(self, rule: ProductPriceRule) -> ProductPriceRule:
        model = PriceRuleMapper.to_model(rule, _get_or_none(self.PriceRuleModel, pk=rule.id))
        model.save()
        return PriceRuleMapper.to_entity(model)

    def delete(self, rule_id: str) -> None:
        deleted, _ = self.PriceRuleModel.objects.filter(pk=rule_id).delete()
        if not deleted:
            raise PriceRuleNotFoundError()


# ====================================================================
# 3. PEDIDOS
# ====================================================================

class OrderRepositoryDjango(IOrderRepository):

    @property
    def OrderModel(self):
        return get_model('orders', 'Order')

    def get_by_id(self, order_id: str) -> Optional[Order]:
        return OrderMapper.to_entity(_get_or_none(self.OrderModel, pk=order_id))

    def list(
        self,
        page: int,
        limit: int,
        user_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Page:
        qs = self.OrderModel.objects.all()
        if user_id:
            qs = qs.filter(user_id=user_id)
        if status:
            qs = qs.filter(status=status)
        return paginate(qs.order_by('-created_at'), page, limit, OrderMapper.to_entity)

    def save(self, order: Order) -> Order:
        model = OrderMapper.to_model(order, _get_or_none(self.OrderModel, pk=order.id))
        model.save()
        return OrderMapper.to_entity(model)

    def update_locked(self, order_id: str, mutate: Callable[[Order], None]) -> Order:
        """
        Lê o pedido com lock de linha (SELECT ... FOR UPDATE), aplica `mutate`
        e salva na mesma transação. Se `mutate` levantar exceção nada é gravado.
        """
        with transaction.atomic():
            try:
                model = self.OrderModel.objects.select_for_update().get(pk=order_id)
            except (self.OrderModel.DoesNotExist,) + LOOKUP_ERRORS:
                raise OrderNotFoundError()

            order = OrderMapper.to_entity(model)
            mutate(order)
            model = OrderMapper.to_model(order, model)
            model.save()
        return OrderMapper.to_entity(model)

    def delete(self, order_id: str) -> None:
        deleted, _ = self.OrderModel.objects.filter(pk=order_id).delete()
        if not deleted:
            raise OrderNotFoundError()


# ====================================================================
# 4. PAGAMENTOS
# ====================================================================

class PaymentEventRepositoryDjango(IPaymentEventRepository):

    @property
    def PaymentEventModel(self):
        return get_model('payments', 'PaymentEvent')

    def record(self, event: PaymentEvent) -> bool:
        if self.PaymentEventModel.objects.filter(event_id=event.event_id).exists():
            return False
        try:
            with transaction.atomic():
                PaymentEventMapper.to_model(event).save()
        except IntegrityError:
            # Outra requisição registrou o mesmo evento entre a checagem e o insert.
            return False
        return True
