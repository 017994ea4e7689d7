# storefront/core/ports.py
"""
Definição das Portas (Interfaces/Protocolos) da Arquitetura Limpa.

Estes protocolos definem o contrato que a camada de Infraestrutura (Repositórios, Gateways)
DEVE seguir para se conectar à camada Core (Casos de Uso).
"""

from typing import Protocol, Callable, List, Optional, Dict, Any
from abc import abstractmethod

from storefront.core.entities import (
    User, Category, Color, Variant, Product, ProductVariant, ProductPriceRule,
    Order, PaymentEvent, Page
)


# ====================================================================
# 1. REPOSITÓRIOS (Portas de Persistência)
# ====================================================================

class IUserRepository(Protocol):
    """Protocolo para a persistência e busca de Usuários."""

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def list(
        self,
        filters: Dict[str, Any],
        page: int,
        limit: int,
        sort_by: str,
        sort_order: str,
    ) -> Page: ...

    # A senha em texto puro é recebida aqui e nunca sai da infraestrutura sem hash.
    @abstractmethod
    def save(self, user: User, password: Optional[str] = None) -> User: ...

    @abstractmethod
    def delete(self, user_id: str) -> None: ...


class ICategoryRepository(Protocol):
    """Protocolo para a persistência e busca de Categorias."""

    @abstractmethod
    def get_by_id(self, category_id: str) -> Optional[Category]: ...

    @abstractmethod
    def get_by_slug(self, slug: str) -> Optional[Category]: ...

    @abstractmethod
    def list(self, status: Optional[str] = None) -> List[Category]: ...

    @abstractmethod
    def save(self, category: Category) -> Category: ...

    @abstractmethod
    def delete(self, category_id: str) -> None: ...


class IColorRepository(Protocol):

    @abstractmethod
    def get_by_id(self, color_id: str) -> Optional[Color]: ...

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Color]: ...

    @abstractmethod
    def list(self) -> List[Color]: ...

    @abstractmethod
    def save(self, color: Color) -> Color: ...

    @abstractmethod
    def delete(self, color_id: str) -> None: ...


class IVariantRepository(Protocol):

    @abstractmethod
    def get_by_id(self, variant_id: str) -> Optional[Variant]: ...

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Variant]: ...

    @abstractmethod
    def list(self) -> List[Variant]: ...

    @abstractmethod
    def save(self, variant: Variant) -> Variant: ...

    @abstractmethod
    def delete(self, variant_id: str) -> None: ...


class IProductRepository(Protocol):
    """Protocolo para a persistência e busca de Produtos e suas variações."""

    @abstractmethod
    def get_by_id(self, product_id: str) -> Optional[Product]: ...

    @abstractmethod
    def get_by_code(self, product_code: str) -> Optional[Product]: ...

    @abstractmethod
    def get_variant(self, product_variant_id: str) -> Optional[ProductVariant]: ...

    @abstractmethod
    def sku_exists(self, sku: str, exclude_product_id: Optional[str] = None) -> bool: ...

    @abstractmethod
    def list(
        self,
        filters: Dict[str, Any],
        page: int,
        limit: int,
        sort_by: str,
        sort_order: str,
    ) -> Page: ...

    # Salva o produto e substitui suas variações pelas da entidade.
    @abstractmethod
    def save(self, product: Product) -> Product: ...

    @abstractmethod
    def delete(self, product_id: str) -> None: ...


class IPriceRuleRepository(Protocol):

    @abstractmethod
    def get_by_id(self, rule_id: str) -> Optional[ProductPriceRule]: ...

    @abstractmethod
    def list(
        self,
        product_id: Optional[str] = None,
        variant_id: Optional[str] = None,
    ) -> List[ProductPriceRule]: ...

    # Regras do produto OU da variação informada (candidatas à resolução de preço).
    @abstractmethod
    def find_for_target(
        self,
        product_id: str,
        variant_id: Optional[str] = None,
    ) -> List[ProductPriceRule]: ...

    @abstractmethod
    def save(self, rule: ProductPriceRule) -> ProductPriceRule: ...

    @abstractmethod
    def delete(self, rule_id: str) -> None: ...


class IOrderRepository(Protocol):
    """Protocolo para a persistência e busca de Pedidos."""

    @abstractmethod
    def get_by_id(self, order_id: str) -> Optional[Order]: ...

    @abstractmethod
    def list(
        self,
        page: int,
        limit: int,
        user_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Page: ...

    @abstractmethod
    def save(self, order: Order) -> Order: ...

    # Leitura com lock, mutate(order) e gravação numa única transação.
    @abstractmethod
    def update_locked(self, order_id: str, mutate: Callable[[Order], None]) -> Order: ...

    @abstractmethod
    def delete(self, order_id: str) -> None: ...


class IPaymentEventRepository(Protocol):

    # Retorna False quando o event_id já havia sido registrado.
    @abstractmethod
    def record(self, event: PaymentEvent) -> bool: ...


# ====================================================================
# 2. GATEWAYS (Portas de Serviços Externos)
# ====================================================================

class IPaymentGateway(Protocol):
    """Protocolo para o provedor de pagamentos (PayPal)."""

    @abstractmethod
    def create_order(self, order_data: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    def capture_order(self, order_id: str) -> Dict[str, Any]: ...
