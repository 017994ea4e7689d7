# storefront/core/use_cases.py
"""
Implementação dos Casos de Uso (Lógica de Negócio) da aplicação.
Esta camada depende apenas das Entidades e Portas (Interfaces) do Core,
garantindo o isolamento da lógica de negócio.
"""
import logging
import re
import time
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Dict, Any, Callable

from django.utils.text import slugify

# Entidades e Exceções
from storefront.core.entities import (
    User, Category, Color, Variant, Product, ProductVariant, ProductPriceRule,
    Order, OrderItem, TrackingEntry, PaymentEvent, Page,
    Role, CategoryStatus, OrderStatus, PriceRuleType, quantize_money
)
from storefront.core.exceptions import (
    InvalidDataError,
    UserNotFoundError,
    OrderNotFoundError,
    CategoryNotFoundError,
    ProductNotFoundError,
    VariantNotFoundError,
    ColorNotFoundError,
    PriceRuleNotFoundError,
    ConflictError,
    EmailAlreadyInUseError,
    SlugAlreadyExistsError,
    PermissionDeniedError,
    InvalidStatusError,
    InvalidStatusTransitionError,
)

# Portas (Interfaces) - Importadas do storefront/core/ports.py
from storefront.core.ports import (
    IUserRepository,
    ICategoryRepository,
    IColorRepository,
    IVariantRepository,
    IProductRepository,
    IPriceRuleRepository,
    IOrderRepository,
    IPaymentEventRepository,
    IPaymentGateway,
)

logger = logging.getLogger(__name__)

HEX_COLOR_RE = re.compile(r'^#[0-9A-Fa-f]{6}$')

USER_SORT_FIELDS = ('id', 'email', 'role', 'created_at', 'updated_at')
PRODUCT_SORT_FIELDS = ('product_code', 'created_at', 'updated_at')
SORT_ORDERS = ('ASC', 'DESC')
MAX_PAGE_LIMIT = 100


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def check_pagination(page: int, limit: int) -> None:
    """Garante page >= 1 e 1 <= limit <= 100."""
    if page < 1:
        raise InvalidDataError("page must not be less than 1.")
    if limit < 1 or limit > MAX_PAGE_LIMIT:
        raise InvalidDataError(f"limit must be between 1 and {MAX_PAGE_LIMIT}.")


def check_sorting(sort_by: str, sort_order: str, allowed) -> None:
    if sort_by not in allowed:
        raise InvalidDataError(f"sort_by must be one of: {', '.join(allowed)}.")
    if sort_order not in SORT_ORDERS:
        raise InvalidDataError("sort_order must be ASC or DESC.")


# ====================================================================
# 1. CASOS DE USO DE USUÁRIOS
# ====================================================================

class ManageUsersUseCase:
    """Caso de Uso que centraliza o CRUD de usuários (administração e cadastro)."""

    def __init__(self, user_repo: IUserRepository):
        self.user_repo = user_repo

    def create(self, data: Dict[str, Any]) -> User:
        """Cria um usuário; o e-mail deve ser único."""
        email = data['email'].strip().lower()
        if self.user_repo.get_by_email(email):
            raise EmailAlreadyInUseError()

        role = data.get('role', Role.USER.value)
        if role not in [r.value for r in Role]:
            raise InvalidDataError(f"Invalid role: {role}.")

        user = User(
            email=email,
            phone_number=data['phone_number'],
            role=role,
            profile=data.get('profile') or '',
        )
        created = self.user_repo.save(user, password=data['password'])
        logger.info("Usuário %s criado com papel %s.", created.id, created.role)
        return created

    def register(self, data: Dict[str, Any]) -> User:
        """Cadastro público: o papel é sempre USER."""
        return self.create({**data, 'role': Role.USER.value})

    def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        page: int = 1,
        limit: int = 10,
        sort_by: str = 'created_at',
        sort_order: str = 'DESC',
    ) -> Page:
        check_pagination(page, limit)
        check_sorting(sort_by, sort_order, USER_SORT_FIELDS)
        clean_filters = {k: v for k, v in (filters or {}).items() if v not in (None, '')}
        return self.user_repo.list(clean_filters, page, limit, sort_by, sort_order)

    def get(self, user_id: str) -> User:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(f"User {user_id} not found.")
        return user

    def update(self, user_id: str, data: Dict[str, Any]) -> User:
        user = self.get(user_id)

        if 'email' in data and data['email']:
            email = data['email'].strip().lower()
            if email != user.email:
                existing = self.user_repo.get_by_email(email)
                if existing and existing.id != user.id:
                    raise EmailAlreadyInUseError()
            user.email = email

        for attr in ('phone_number', 'role', 'profile', 'is_active'):
            if attr in data and data[attr] is not None:
                setattr(user, attr, data[attr])

        if user.role not in [r.value for r in Role]:
            raise InvalidDataError(f"Invalid role: {user.role}.")

        return self.user_repo.save(user, password=data.get('password'))

    def delete(self, user_id: str) -> None:
        self.get(user_id)
        self.user_repo.delete(user_id)
        logger.info("Usuário %s removido.", user_id)


# ====================================================================
# 2. CASOS DE USO DO CATÁLOGO
# ====================================================================

class ManageCategoriesUseCase:
    """CRUD de categorias com slug único."""

    def __init__(self, category_repo: ICategoryRepository):
        self.category_repo = category_repo

    def create(self, data: Dict[str, Any]) -> Category:
        slug = data.get('slug') or slugify(data['name'])
        if not slug:
            raise InvalidDataError("Could not derive a slug from the category name.")
        if self.category_repo.get_by_slug(slug):
            raise SlugAlreadyExistsError()

        category = Category(
            name=data['name'],
            slug=slug,
            status=data.get('status') or CategoryStatus.ACTIVE.value,
            description=data.get('description'),
        )
        return self.category_repo.save(category)

    def list(self, status: Optional[str] = None) -> List[Category]:
        return self.category_repo.list(status=status)

    def get(self, category_id: str) -> Category:
        category = self.category_repo.get_by_id(category_id)
        if not category:
            raise CategoryNotFoundError()
        return category

    def update(self, category_id: str, data: Dict[str, Any]) -> Category:
        category = self.get(category_id)

        new_slug = data.get('slug')
        if new_slug and new_slug != category.slug:
            existing = self.category_repo.get_by_slug(new_slug)
            if existing and existing.id != category.id:
                raise SlugAlreadyExistsError()
            category.slug = new_slug

        for attr in ('name', 'status', 'description'):
            if attr in data and data[attr] is not None:
                setattr(category, attr, data[attr])
        return self.category_repo.save(category)

    def delete(self, category_id: str) -> None:
        self.get(category_id)
        self.category_repo.delete(category_id)


class ManageColorsUseCase:
    """CRUD de cores (nome único, hex_code no formato #RRGGBB)."""

    def __init__(self, color_repo: IColorRepository):
        self.color_repo = color_repo

    def _check_hex(self, hex_code: Optional[str]) -> None:
        if hex_code and not HEX_COLOR_RE.match(hex_code):
            raise InvalidDataError("hex_code must match #RRGGBB.")

    def create(self, data: Dict[str, Any]) -> Color:
        self._check_hex(data.get('hex_code'))
        if self.color_repo.get_by_name(data['name']):
            raise ConflictError("Color name already exists.")
        color = Color(
            name=data['name'],
            hex_code=data.get('hex_code'),
            image_url=data.get('image_url'),
        )
        return self.color_repo.save(color)

    def list(self) -> List[Color]:
        return self.color_repo.list()

    def get(self, color_id: str) -> Color:
        color = self.color_repo.get_by_id(color_id)
        if not color:
            raise ColorNotFoundError()
        return color

    def update(self, color_id: str, data: Dict[str, Any]) -> Color:
        color = self.get(color_id)
        self._check_hex(data.get('hex_code'))
        name = data.get('name')
        if name and name != color.name:
            existing = self.color_repo.get_by_name(name)
            if existing and existing.id != color.id:
                raise ConflictError("Color name already exists.")
        for attr in ('name', 'hex_code', 'image_url'):
            if attr in data:
                setattr(color, attr, data[attr])
        return self.color_repo.save(color)

    def delete(self, color_id: str) -> None:
        self.get(color_id)
        self.color_repo.delete(color_id)


class ManageVariantsUseCase:
    """CRUD de variações genéricas (nome único)."""

    def __init__(self, variant_repo: IVariantRepository):
        self.variant_repo = variant_repo

    def create(self, data: Dict[str, Any]) -> Variant:
        if self.variant_repo.get_by_name(data['name']):
            raise ConflictError("Variant name already exists.")
        return self.variant_repo.save(Variant(name=data['name']))

    def list(self) -> List[Variant]:
        return self.variant_repo.list()

    def get(self, variant_id: str) -> Variant:
        variant = self.variant_repo.get_by_id(variant_id)
        if not variant:
            raise VariantNotFoundError()
        return variant

    def update(self, variant_id: str, data: Dict[str, Any]) -> Variant:
        variant = self.get(variant_id)
        name = data.get('name')
        if name and name != variant.name:
            existing = self.variant_repo.get_by_name(name)
            if existing and existing.id != variant.id:
                raise ConflictError("Variant name already exists.")
            variant.name = name
        return self.variant_repo.save(variant)

    def delete(self, variant_id: str) -> None:
        self.get(variant_id)
        self.variant_repo.delete(variant_id)


class ManageProductsUseCase:
    """
    Caso de Uso de produtos: cadastro com variações aninhadas,
    listagem paginada com filtros e remoção.
    """

    def __init__(
        self,
        product_repo: IProductRepository,
        category_repo: ICategoryRepository,
        color_repo: IColorRepository,
        variant_repo: IVariantRepository,
    ):
        self.product_repo = product_repo
        self.category_repo = category_repo
        self.color_repo = color_repo
        self.variant_repo = variant_repo

    def _build_variants(
        self,
        variants_data: List[Dict[str, Any]],
        product_id: Optional[str] = None,
    ) -> List[ProductVariant]:
        """Valida SKUs e combinações cor/variação e monta as entidades."""
        seen_skus = set()
        seen_combos = set()
        result = []
        for data in variants_data:
            sku = data.get('sku')
            if not sku or data.get('price') is None:
                raise InvalidDataError("Each variant requires sku and price.")
            if sku in seen_skus or self.product_repo.sku_exists(sku, exclude_product_id=product_id):
                raise ConflictError(f"SKU {sku} already exists.")
            seen_skus.add(sku)

            color_id = data.get('color_id')
            variant_id = data.get('variant_id')
            if color_id and not self.color_repo.get_by_id(str(color_id)):
                raise ColorNotFoundError(f"Color {color_id} not found.")
            if variant_id and not self.variant_repo.get_by_id(str(variant_id)):
                raise VariantNotFoundError(f"Variant {variant_id} not found.")

            combo = (str(color_id) if color_id else None, str(variant_id) if variant_id else None)
            if combo in seen_combos:
                raise ConflictError("Duplicate color/variant combination for this product.")
            seen_combos.add(combo)

            result.append(ProductVariant(
                sku=sku,
                price=quantize_money(data['price']),
                sale_price=quantize_money(data['sale_price']) if data.get('sale_price') is not None else None,
                color_id=combo[0],
                variant_id=combo[1],
                quantity=data.get('quantity', 0),
                image_url=data.get('image_url'),
                is_available=data.get('is_available', True),
                attributes=data.get('attributes') or {},
            ))
        return result

    def create(self, data: Dict[str, Any]) -> Product:
        if self.product_repo.get_by_code(data['product_code']):
            raise ConflictError("Product code already exists.")
        category_id = str(data['category_id'])
        if not self.category_repo.get_by_id(category_id):
            raise CategoryNotFoundError()

        product = Product(
            product_code=data['product_code'],
            category_id=category_id,
            product_sku=data.get('product_sku'),
            quantity=data.get('quantity', 0),
            description=data.get('description'),
            tags=data.get('tags') or [],
            images=data.get('images') or [],
            is_featured=data.get('is_featured', False),
        )
        product.variants = self._build_variants(data.get('variants') or [], product.id)
        saved = self.product_repo.save(product)
        logger.info("Produto %s criado com %d variações.", saved.id, len(saved.variants))
        return saved

    def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        page: int = 1,
        limit: int = 10,
        sort_by: str = 'created_at',
        sort_order: str = 'DESC',
    ) -> Page:
        check_pagination(page, limit)
        check_sorting(sort_by, sort_order, PRODUCT_SORT_FIELDS)
        clean_filters = {k: v for k, v in (filters or {}).items() if v not in (None, '')}
        return self.product_repo.list(clean_filters, page, limit, sort_by, sort_order)

    def get(self, product_id: str) -> Product:
        product = self.product_repo.get_by_id(product_id)
        if not product:
            raise ProductNotFoundError()
        return product

    def update(self, product_id: str, data: Dict[str, Any]) -> Product:
        product = self.get(product_id)

        code = data.get('product_code')
        if code and code != product.product_code:
            existing = self.product_repo.get_by_code(code)
            if existing and existing.id != product.id:
                raise ConflictError("Product code already exists.")
            product.product_code = code

        if data.get('category_id'):
            category_id = str(data['category_id'])
            if not self.category_repo.get_by_id(category_id):
                raise CategoryNotFoundError()
            product.category_id = category_id

        for attr in ('product_sku', 'quantity', 'description', 'tags', 'images', 'is_featured'):
            if attr in data and data[attr] is not None:
                setattr(product, attr, data[attr])

        if 'variants' in data and data['variants'] is not None:
            product.variants = self._build_variants(data['variants'], product.id)

        return self.product_repo.save(product)

    def delete(self, product_id: str) -> None:
        self.get(product_id)
        self.product_repo.delete(product_id)


class ManagePriceRulesUseCase:
    """Cadastro de regras de preço; cada regra aponta para um produto OU uma variação."""

    def __init__(self, price_rule_repo: IPriceRuleRepository, product_repo: IProductRepository):
        self.price_rule_repo = price_rule_repo
        self.product_repo = product_repo

    def create(self, data: Dict[str, Any]) -> ProductPriceRule:
        product_id = str(data['product_id']) if data.get('product_id') else None
        variant_id = str(data['variant_id']) if data.get('variant_id') else None

        if bool(product_id) == bool(variant_id):
            raise InvalidDataError("Exactly one of product_id or variant_id must be provided.")

        rule_type = data.get('type') or PriceRuleType.PERCENT.value
        if rule_type not in [t.value for t in PriceRuleType]:
            raise InvalidDataError("type must be 'percent' or 'fixed'.")

        try:
            value = quantize_money(data['value'])
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidDataError("value must be a decimal number.")
        if value < 0:
            raise InvalidDataError("value must not be negative.")
        if rule_type == PriceRuleType.PERCENT.value and value > 100:
            raise InvalidDataError("A percent rule cannot exceed 100.")

        start_at = data.get('start_at')
        end_at = data.get('end_at')
        if start_at and end_at and end_at <= start_at:
            raise InvalidDataError("end_at must be after start_at.")

        if product_id and not self.product_repo.get_by_id(product_id):
            raise ProductNotFoundError()
        if variant_id and not self.product_repo.get_variant(variant_id):
            raise VariantNotFoundError()

        rule = ProductPriceRule(
            type=rule_type,
            value=value,
            product_id=product_id,
            variant_id=variant_id,
            start_at=start_at,
            end_at=end_at,
            priority=data.get('priority') or 0,
        )
        return self.price_rule_repo.save(rule)

    def list(self, product_id: Optional[str] = None, variant_id: Optional[str] = None) -> List[ProductPriceRule]:
        return self.price_rule_repo.list(product_id=product_id, variant_id=variant_id)

    def delete(self, rule_id: str) -> None:
        if not self.price_rule_repo.get_by_id(rule_id):
            raise PriceRuleNotFoundError()
        self.price_rule_repo.delete(rule_id)


class ResolvePriceUseCase:
    """
    Calcula o preço final de um produto (ou variação) em um instante.

    Entre as regras ativas vence a de maior prioridade; em empate a regra
    da variação vence a do produto e, depois, a de início mais recente.
    """

    def __init__(
        self,
        product_repo: IProductRepository,
        price_rule_repo: IPriceRuleRepository,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.product_repo = product_repo
        self.price_rule_repo = price_rule_repo
        self.clock = clock

    @staticmethod
    def select_rule(rules: List[ProductPriceRule], moment: datetime) -> Optional[ProductPriceRule]:
        active = [rule for rule in rules if rule.is_active_at(moment)]
        if not active:
            return None
        oldest = datetime.min.replace(tzinfo=timezone.utc)
        return max(
            active,
            key=lambda r: (r.priority, r.variant_id is not None, r.start_at or oldest),
        )

    def execute(
        self,
        product_id: str,
        variant_id: Optional[str] = None,
        moment: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        product = self.product_repo.get_by_id(product_id)
        if not product:
            raise ProductNotFoundError()

        if variant_id:
            variant = next((v for v in product.variants if v.id == str(variant_id)), None)
            if not variant:
                raise VariantNotFoundError(f"Variant {variant_id} does not belong to this product.")
            base_price = variant.effective_price
        else:
            base_price = product.min_price
            if base_price is None:
                raise InvalidDataError("Product has no available variants to price.")

        moment = moment or self.clock()
        rules = self.price_rule_repo.find_for_target(product.id, str(variant_id) if variant_id else None)
        rule = self.select_rule(rules, moment)
        final_price = rule.apply(base_price) if rule else quantize_money(base_price)

        return {
            'product_id': product.id,
            'variant_id': str(variant_id) if variant_id else None,
            'base_price': quantize_money(base_price),
            'final_price': final_price,
            'rule': rule,
            'resolved_at': moment,
        }


# ====================================================================
# 3. CASOS DE USO DE PEDIDOS
# ====================================================================

class CreateOrderUseCase:
    """Cria um pedido PENDING calculando os totais a partir dos itens."""

    def __init__(
        self,
        order_repo: IOrderRepository,
        user_repo: IUserRepository,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.order_repo = order_repo
        self.user_repo = user_repo
        self.clock = clock

    def execute(
        self,
        user_id: str,
        items: List[Dict[str, Any]],
        shipping_address: Optional[Dict[str, Any]] = None,
        payment_info: Optional[Dict[str, Any]] = None,
        created_by: Optional[str] = None,
    ) -> Order:
        if not self.user_repo.get_by_id(str(user_id)):
            raise UserNotFoundError(f"User {user_id} not found.")
        if not items:
            raise InvalidDataError("An order must contain at least one item.")

        order_items = []
        for item in items:
            quantity = int(item['quantity'])
            if quantity < 1:
                raise InvalidDataError("Item quantity must be at least 1.")
            order_items.append(OrderItem(
                product_id=str(item['product_id']),
                product_name=item['product_name'],
                quantity=quantity,
                unit_price=quantize_money(item['unit_price']),
                product_slug=item.get('product_slug'),
                variant_id=str(item['variant_id']) if item.get('variant_id') else None,
                variant_name=item.get('variant_name'),
                sku=item.get('sku'),
            ))

        order = Order(
            user_id=str(user_id),
            items=order_items,
            status=OrderStatus.PENDING.value,
            shipping_address=shipping_address,
            payment_info=payment_info,
        )
        order.calculate_total()
        order.tracking_history.append(TrackingEntry(
            from_status=None,
            to_status=OrderStatus.PENDING.value,
            changed_at=self.clock(),
            changed_by=str(created_by or user_id),
            note='Order created',
        ))

        saved = self.order_repo.save(order)
        logger.info("Pedido %s criado para o usuário %s (total %s).", saved.id, saved.user_id, saved.total)
        return saved


class ManageOrdersUseCase:
    """
    Consulta e manutenção de pedidos.

    Usuários comuns só enxergam os próprios pedidos; alterações de dados
    e de status são exclusivas de administradores.
    """

    def __init__(self, order_repo: IOrderRepository, clock: Callable[[], datetime] = utcnow):
        self.order_repo = order_repo
        self.clock = clock

    def list(
        self,
        actor: User,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Page:
        check_pagination(page, limit)
        if status and status not in OrderStatus.values():
            raise InvalidStatusError()
        if not actor.is_admin:
            user_id = actor.id
        return self.order_repo.list(page=page, limit=limit, user_id=user_id, status=status)

    def list_own(self, actor: User, page: int = 1, limit: int = 10, status: Optional[str] = None) -> Page:
        check_pagination(page, limit)
        if status and status not in OrderStatus.values():
            raise InvalidStatusError()
        return self.order_repo.list(page=page, limit=limit, user_id=actor.id, status=status)

    def get(self, order_id: str, actor: User) -> Order:
        order = self.order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFoundError()
        if not actor.is_admin and order.user_id != actor.id:
            raise PermissionDeniedError("You can only access your own orders.")
        return order

    def _require_admin(self, actor: User) -> None:
        if not actor.is_admin:
            raise PermissionDeniedError("Only administrators can modify orders.")

    def _apply_status(self, order: Order, target: str, actor: User, note: Optional[str]) -> None:
        if target not in OrderStatus.values():
            raise InvalidStatusError(f"Invalid status: {target}.")
        if target == order.status:
            return
        if not order.can_transition_to(target):
            raise InvalidStatusTransitionError(order.status, target)

        order.tracking_history.append(TrackingEntry(
            from_status=order.status,
            to_status=target,
            changed_at=self.clock(),
            changed_by=actor.id,
            note=note,
        ))
        logger.info("Pedido %s: %s -> %s por %s.", order.id, order.status, target, actor.id)
        order.status = target

    def update(self, order_id: str, data: Dict[str, Any], actor: User) -> Order:
        self._require_admin(actor)

        def mutate(order: Order) -> None:
            for attr in ('shipping_address', 'payment_info'):
                if attr in data:
                    setattr(order, attr, data[attr])
            if data.get('status'):
                self._apply_status(order, data['status'], actor, data.get('note'))

        return self.order_repo.update_locked(order_id, mutate)

    def change_status(self, order_id: str, status: str, actor: User, note: Optional[str] = None) -> Order:
        """A checagem da transição roda sobre o pedido já travado pelo repositório."""
        self._require_admin(actor)

        def mutate(order: Order) -> None:
            if status == order.status:
                raise InvalidStatusTransitionError(order.status, status, f"Order is already {status}.")
            self._apply_status(order, status, actor, note)

        return self.order_repo.update_locked(order_id, mutate)

    def status_history(self, order_id: str, actor: User) -> List[Dict[str, Any]]:
        """Histórico de status com a duração (em segundos) de cada etapa."""
        order = self.get(order_id, actor)
        entries = sorted(order.tracking_history, key=lambda e: e.changed_at)
        now = self.clock()

        history = []
        for index, entry in enumerate(entries):
            ended_at = entries[index + 1].changed_at if index + 1 < len(entries) else now
            history.append({
                'from_status': entry.from_status,
                'to_status': entry.to_status,
                'changed_at': entry.changed_at,
                'changed_by': entry.changed_by,
                'note': entry.note,
                'duration_seconds': max(int((ended_at - entry.changed_at).total_seconds()), 0),
            })
        return history

    def delete(self, order_id: str, actor: User) -> None:
        self._require_admin(actor)
        self.get(order_id, actor)
        self.order_repo.delete(order_id)
        logger.info("Pedido %s removido por %s.", order_id, actor.id)


# ====================================================================
# 4. CASOS DE USO DE PAGAMENTO
# ====================================================================

def _text(value: Any, max_length: int) -> Optional[str]:
    """Converte um campo livre do webhook em texto que cabe na coluna."""
    if value is None or value == '':
        return None
    return str(value)[:max_length]


class PaymentsUseCase:
    """Fluxo PayPal: criação e captura de ordens e recebimento de webhooks."""

    def __init__(self, payment_gateway: IPaymentGateway, event_repo: IPaymentEventRepository):
        self.payment_gateway = payment_gateway
        self.event_repo = event_repo

    def create_paypal_order(self, order_data: Dict[str, Any]) -> Dict[str, Any]:
        return self.payment_gateway.create_order(order_data)

    def capture_paypal_order(self, order_id: str) -> Dict[str, Any]:
        return self.payment_gateway.capture_order(order_id)

    def handle_webhook(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        logger.info("Webhook PayPal recebido: %s", payload)

        event_id = payload.get('id') if isinstance(payload, dict) else None
        if not event_id:
            return {'received': True, 'duplicate': False}

        resource = payload.get('resource')
        if not isinstance(resource, dict):
            logger.warning("Webhook %s com 'resource' inválido: %r", event_id, resource)
            resource = {}

        event = PaymentEvent(
            event_id=_text(event_id, 255),
            event_type=_text(payload.get('event_type'), 100),
            order_id=_text(resource.get('custom_id') or resource.get('invoice_id'), 255),
            resource_status=_text(resource.get('status'), 50),
            raw_data=payload,
        )
        recorded = self.event_repo.record(event)
        if not recorded:
            logger.warning("Evento de webhook %s já processado; ignorando.", event_id)
        return {'received': True, 'duplicate': not recorded}


# ====================================================================
# 5. SAÚDE DA APLICAÇÃO
# ====================================================================

class HealthCheckUseCase:
    """Informa que a API está no ar, com o timestamp atual em milissegundos."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock

    def execute(self) -> Dict[str, Any]:
        return {'status': 'ok', 'timestamp': int(self.clock() * 1000)}
