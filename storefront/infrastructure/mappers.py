"""
Mapeadores (Mappers) para converter entre:
1. Modelos do Django ORM
2. Entidades de Domínio (storefront.core.entities)
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Dict

from django.apps import apps
from django.utils.dateparse import parse_datetime

from storefront.core.entities import (
    User as UserEntity,
    Category as CategoryEntity,
    Color as ColorEntity,
    Variant as VariantEntity,
    Product as ProductEntity,
    ProductVariant as ProductVariantEntity,
    ProductPriceRule as ProductPriceRuleEntity,
    Order as OrderEntity,
    OrderItem as OrderItemEntity,
    TrackingEntry as TrackingEntryEntity,
    PaymentEvent as PaymentEventEntity,
)


def get_model(app_label: str, model_name: str):
    """Retorna um modelo do Django de forma segura (lazy loading)."""
    return apps.get_model(app_label, model_name)


def _str_or_none(value) -> Optional[str]:
    return str(value) if value is not None else None


# ====================================================================
# MAPPER DE USUÁRIO
# ====================================================================

class UserMapper:

    @staticmethod
    def to_entity(model: Any) -> Optional[UserEntity]:
        if not model:
            return None
        return UserEntity(
            id=str(model.id),
            email=model.email,
            phone_number=model.phone_number,
            role=model.role,
            profile=model.profile or '',
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_model(entity: UserEntity, model: Optional[Any] = None) -> Any:
        """A senha não passa pelo mapper: o repositório aplica set_password."""
        if model is None:
            model = get_model('infrastructure', 'User')(id=entity.id)
        model.email = entity.email
        model.phone_number = entity.phone_number
        model.role = entity.role
        model.profile = entity.profile or ''
        model.is_active = entity.is_active
        return model


# ====================================================================
# MAPPERS DO CATÁLOGO
# ====================================================================

class CategoryMapper:

    @staticmethod
    def to_entity(model: Any) -> Optional[CategoryEntity]:
        if not model:
            return None
        return CategoryEntity(
            id=str(model.id),
            name=model.name,
            slug=model.slug,
            status=model.status,
            description=model.description,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_model(entity: CategoryEntity, model: Optional[Any] = None) -> Any:
        if model is None:
            model = get_model('catalog', 'Category')(id=entity.id)
        model.name = entity.name
        model.slug = entity.slug
        model.status = entity.status
        model.description = entity.description
        return model


class ColorMapper:

    @staticmethod
    def to_entity(model: Any) -> Optional[ColorEntity]:
        if not model:
            return None
        return ColorEntity(
            id=str(model.id),
            name=model.name,
            hex_code=model.hex_code,
            image_url=model.image_url,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_model(entity: ColorEntity, model: Optional[Any] = None) -> Any:
        if model is None:
            model = get_model('catalog', 'Color')(id=entity.id)
        model.name = entity.name
        model.hex_code = entity.hex_code
        model.image_url = entity.image_url
        return model


class VariantMapper:

    @staticmethod
    def to_entity(model: Any) -> Optional[VariantEntity]:
        if not model:
            return None
        return VariantEntity(
            id=str(model.id),
            name=model.name,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_model(entity: VariantEntity, model: Optional[Any] = None) -> Any:
        if model is None:
            model = get_model('catalog', 'Variant')(id=entity.id)
        model.name = entity.name
        return model


class ProductVariantMapper:

    @staticmethod
    def to_entity(model: Any) -> Optional[ProductVariantEntity]:
        if not model:
            return None
        return ProductVariantEntity(
            id=str(model.id),
            product_id=str(model.product_id),
            color_id=_str_or_none(model.color_id),
            variant_id=_str_or_none(model.variant_id),
            sku=model.sku,
            price=model.price,
            sale_price=model.sale_price,
            quantity=model.quantity,
            image_url=model.image_url,
            is_available=model.is_available,
            attributes=model.attributes or {},
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_model(entity: ProductVariantEntity, product_model: Any) -> Any:
        return get_model('catalog', 'ProductVariant')(
            id=entity.id,
            product=product_model,
            color_id=entity.color_id,
            variant_id=entity.variant_id,
            sku=entity.sku,
            price=entity.price,
            sale_price=entity.sale_price,
            quantity=entity.quantity,
            image_url=entity.image_url,
            is_available=entity.is_available,
            attributes=entity.attributes or {},
        )


class ProductMapper:

    @staticmethod
    def to_entity(model: Any) -> Optional[ProductEntity]:
        """Converte Product Model (com variações pré-carregadas) para Product Entity."""
        if not model:
            return None
        return ProductEntity(
            id=str(model.id),
            product_code=model.product_code,
            product_sku=model.product_sku,
            category_id=str(model.category_id),
            quantity=model.quantity,
            description=model.description,
            tags=model.tags or [],
            images=model.images or [],
            is_featured=model.is_featured,
            variants=[ProductVariantMapper.to_entity(v) for v in model.variants.all()],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_model(entity: ProductEntity, model: Optional[Any] = None) -> Any:
        if model is None:
            model = get_model('catalog', 'Product')(id=entity.id)
        model.product_code = entity.product_code
        model.product_sku = entity.product_sku
        model.category_id = entity.category_id
        model.quantity = entity.quantity
        model.description = entity.description
        model.tags = entity.tags
        model.images = entity.images
        model.is_featured = entity.is_featured
        return model


class PriceRuleMapper:

    @staticmethod
    def to_entity(model: Any) -> Optional[ProductPriceRuleEntity]:
        if not model:
            return None
        return ProductPriceRuleEntity(
            id=str(model.id),
            product_id=_str_or_none(model.product_id),
            variant_id=_str_or_none(model.variant_id),
            type=model.type,
            value=model.value,
            start_at=model.start_at,
            end_at=model.end_at,
            priority=model.priority,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_model(entity: ProductPriceRuleEntity, model: Optional[Any] = None) -> Any:
        if model is None:
            model = get_model('catalog', 'ProductPriceRule')(id=entity.id)
        model.product_id = entity.product_id
        model.variant_id = entity.variant_id
        model.type = entity.type
        model.value = entity.value
        model.start_at = entity.start_at
        model.end_at = entity.end_at
        model.priority = entity.priority
        return model


# ====================================================================
# MAPPER DE PEDIDOS
# Itens e histórico são guardados como JSON; valores monetários como string.
# ====================================================================

class OrderMapper:

    @staticmethod
    def item_to_dict(item: OrderItemEntity) -> Dict[str, Any]:
        return {
            'product_id': item.product_id,
            'product_name': item.product_name,
            'product_slug': item.product_slug,
            'variant_id': item.variant_id,
            'variant_name': item.variant_name,
            'sku': item.sku,
            'quantity': item.quantity,
            'unit_price': str(item.unit_price),
            'total_price': str(item.total_price),
        }

    @staticmethod
    def item_from_dict(data: Dict[str, Any]) -> OrderItemEntity:
        return OrderItemEntity(
            product_id=data['product_id'],
            product_name=data['product_name'],
            product_slug=data.get('product_slug'),
            variant_id=data.get('variant_id'),
            variant_name=data.get('variant_name'),
            sku=data.get('sku'),
            quantity=int(data['quantity']),
            unit_price=Decimal(str(data['unit_price'])),
        )

    @staticmethod
    def tracking_to_dict(entry: TrackingEntryEntity) -> Dict[str, Any]:
        return {
            'from_status': entry.from_status,
            'to_status': entry.to_status,
            'changed_at': entry.changed_at.isoformat(),
            'changed_by': entry.changed_by,
            'note': entry.note,
        }

    @staticmethod
    def tracking_from_dict(data: Dict[str, Any]) -> TrackingEntryEntity:
        changed_at = data['changed_at']
        if not isinstance(changed_at, datetime):
            changed_at = parse_datetime(changed_at)
        return TrackingEntryEntity(
            from_status=data.get('from_status'),
            to_status=data['to_status'],
            changed_at=changed_at,
            changed_by=data.get('changed_by'),
            note=data.get('note'),
        )

    @classmethod
    def to_entity(cls, model: Any) -> Optional[OrderEntity]:
        if not model:
            return None
        return OrderEntity(
            id=str(model.id),
            user_id=str(model.user_id),
            items=[cls.item_from_dict(i) for i in (model.items or [])],
            status=model.status,
            total=model.total,
            shipping_address=model.shipping_address,
            payment_info=model.payment_info,
            tracking_history=[cls.tracking_from_dict(t) for t in (model.tracking_history or [])],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @classmethod
    def to_model(cls, entity: OrderEntity, model: Optional[Any] = None) -> Any:
        if model is None:
            model = get_model('orders', 'Order')(id=entity.id)
        model.user_id = entity.user_id
        model.items = [cls.item_to_dict(i) for i in entity.items]
        model.status = entity.status
        model.total = entity.total
        model.shipping_address = entity.shipping_address
        model.payment_info = entity.payment_info
        model.tracking_history = [cls.tracking_to_dict(t) for t in entity.tracking_history]
        return model


class PaymentEventMapper:

    @staticmethod
    def to_entity(model: Any) -> Optional[PaymentEventEntity]:
        if not model:
            return None
        return PaymentEventEntity(
            id=str(model.id),
            event_id=model.event_id,
            event_type=model.event_type,
            order_id=model.order_id,
            resource_status=model.resource_status,
            raw_data=model.raw_data or {},
            created_at=model.created_at,
        )

    @staticmethod
    def to_model(entity: PaymentEventEntity) -> Any:
        return get_model('payments', 'PaymentEvent')(
            id=entity.id,
            event_id=entity.event_id,
            event_type=entity.event_type,
            order_id=entity.order_id,
            resource_status=entity.resource_status,
            raw_data=entity.raw_data,
        )
