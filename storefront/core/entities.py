from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from datetime import datetime
from enum import Enum
from typing import List, Optional, Dict, Any
import uuid

CENTS = Decimal('0.01')


def quantize_money(value) -> Decimal:
    """Arredonda um valor monetário para 2 casas decimais."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def new_id() -> str:
    return str(uuid.uuid4())


# ====================================================================
# ENUMERAÇÕES DE DOMÍNIO
# ====================================================================

class Role(str, Enum):
    USER = 'USER'
    ADMIN = 'ADMIN'


class CategoryStatus(str, Enum):
    ACTIVE = 'ACTIVE'
    INACTIVE = 'INACTIVE'


class OrderStatus(str, Enum):
    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    SHIPPED = 'SHIPPED'
    DELIVERED = 'DELIVERED'
    CANCELLED = 'CANCELLED'

    @classmethod
    def values(cls) -> List[str]:
        return [status.value for status in cls]


class PriceRuleType(str, Enum):
    PERCENT = 'percent'
    FIXED = 'fixed'


# Transições permitidas entre status de pedido; DELIVERED e CANCELLED são finais.
ORDER_TRANSITIONS: Dict[str, List[str]] = {
    OrderStatus.PENDING.value: [OrderStatus.CONFIRMED.value, OrderStatus.CANCELLED.value],
    OrderStatus.CONFIRMED.value: [OrderStatus.SHIPPED.value, OrderStatus.CANCELLED.value],
    OrderStatus.SHIPPED.value: [OrderStatus.DELIVERED.value],
    OrderStatus.DELIVERED.value: [],
    OrderStatus.CANCELLED.value: [],
}


# ====================================================================
# ENTIDADES CORE
# Representam os objetos de negócio puros.
# ====================================================================

@dataclass
class User:
    """Entidade do Usuário (cliente ou administrador)."""
    email: str
    phone_number: str
    role: str = Role.USER.value
    profile: str = ''
    is_active: bool = True
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


@dataclass
class Category:
    """Entidade de Categoria de produtos."""
    name: str
    slug: str
    status: str = CategoryStatus.ACTIVE.value
    description: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Color:
    """Cor disponível para as variações de produto."""
    name: str
    hex_code: Optional[str] = None
    image_url: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Variant:
    """Variação genérica (tamanho, modelo) reutilizada entre produtos."""
    name: str
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class ProductVariant:
    """Combinação vendável de produto, cor e variação com SKU e preço próprios."""
    sku: str
    price: Decimal
    product_id: Optional[str] = None
    color_id: Optional[str] = None
    variant_id: Optional[str] = None
    sale_price: Optional[Decimal] = None
    quantity: int = 0
    image_url: Optional[str] = None
    is_available: bool = True
    attributes: Dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def effective_price(self) -> Decimal:
        """Preço promocional quando houver, senão o preço cheio."""
        if self.sale_price is not None:
            return self.sale_price
        return self.price


@dataclass
class Product:
    """Entidade do Produto que está sendo vendido."""
    product_code: str
    category_id: str
    product_sku: Optional[str] = None
    quantity: int = 0
    description: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    images: List[str] = field(default_factory=list)
    is_featured: bool = False
    variants: List[ProductVariant] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def min_price(self) -> Optional[Decimal]:
        """Menor preço entre as variações disponíveis."""
        prices = [v.effective_price for v in self.variants if v.is_available]
        return min(prices) if prices else None


@dataclass
class ProductPriceRule:
    """
    Regra de preço aplicada a um produto ou a uma variação específica.
    Apenas um dos alvos (product_id, variant_id) deve estar preenchido.
    """
    type: str
    value: Decimal
    product_id: Optional[str] = None
    variant_id: Optional[str] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    priority: int = 0
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_active_at(self, moment: datetime) -> bool:
        if self.start_at and moment < self.start_at:
            return False
        if self.end_at and moment >= self.end_at:
            return False
        return True

    def apply(self, price: Decimal) -> Decimal:
        """Aplica o desconto ao preço, nunca abaixo de zero."""
        if self.type == PriceRuleType.PERCENT.value:
            result = price * (Decimal('1') - Decimal(str(self.value)) / Decimal('100'))
        else:
            result = price - Decimal(str(self.value))
        return quantize_money(max(result, Decimal('0')))


@dataclass
class OrderItem:
    """Snapshot de um item no momento da compra (imutável)."""
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    product_slug: Optional[str] = None
    variant_id: Optional[str] = None
    variant_name: Optional[str] = None
    sku: Optional[str] = None

    @property
    def total_price(self) -> Decimal:
        return quantize_money(self.unit_price * self.quantity)


@dataclass
class TrackingEntry:
    """Registro de uma mudança de status no histórico do pedido."""
    to_status: str
    changed_at: datetime
    from_status: Optional[str] = None
    changed_by: Optional[str] = None
    note: Optional[str] = None


@dataclass
class Order:
    """Entidade do Pedido de Venda."""
    user_id: str
    items: List[OrderItem]
    status: str = OrderStatus.PENDING.value
    shipping_address: Optional[Dict[str, Any]] = None
    payment_info: Optional[Dict[str, Any]] = None
    tracking_history: List[TrackingEntry] = field(default_factory=list)
    total: Decimal = Decimal('0.00')
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def calculate_total(self) -> Decimal:
        """Recalcula o total a partir dos itens."""
        self.total = quantize_money(sum((item.total_price for item in self.items), Decimal('0')))
        return self.total

    def can_transition_to(self, target: str) -> bool:
        return target in ORDER_TRANSITIONS.get(self.status, [])


@dataclass
class PaymentEvent:
    """Evento de webhook de pagamento já processado (idempotência)."""
    event_id: str
    event_type: Optional[str] = None
    order_id: Optional[str] = None
    resource_status: Optional[str] = None
    raw_data: Dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None


@dataclass
class Page:
    """Resultado paginado de uma listagem."""
    items: List[Any]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return (self.total + self.limit - 1) // self.limit
