# storefront/core/test_use_cases.py

import unittest
from unittest.mock import Mock
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from storefront.core.use_cases import (
    ManageUsersUseCase,
    ManageCategoriesUseCase,
    ManageProductsUseCase,
    ManagePriceRulesUseCase,
    ResolvePriceUseCase,
    CreateOrderUseCase,
    ManageOrdersUseCase,
    PaymentsUseCase,
    HealthCheckUseCase,
)
from storefront.core.entities import (
    User, Category, Product, ProductVariant, ProductPriceRule, Order, OrderItem, TrackingEntry,
    Role, OrderStatus, Page,
)
from storefront.core.exceptions import (
    EmailAlreadyInUseError,
    SlugAlreadyExistsError,
    InvalidDataError,
    UserNotFoundError,
    PermissionDeniedError,
    InvalidStatusError,
    InvalidStatusTransitionError,
    OrderNotFoundError,
    ConflictError,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def fixed_clock():
    return NOW


class TestManageUsersUseCase(unittest.TestCase):

    def setUp(self):
        """Prepara um repositório de usuários simulado."""
        self.user_repo_mock = Mock()
        self.use_case = ManageUsersUseCase(user_repo=self.user_repo_mock)
        self.dados = {
            'email': 'Cliente@Example.com',
            'phone_number': '5511999999999',
            'password': 'segredo1',
            'role': Role.USER.value,
        }

    def test_criar_usuario_com_sucesso(self):
        # ARRANGE
        self.user_repo_mock.get_by_email.return_value = None
        self.user_repo_mock.save.side_effect = lambda user, password=None: user

        # ACT
        user = self.use_case.create(self.dados)

        # ASSERT: e-mail normalizado e senha entregue ao repositório para hash
        self.assertEqual(user.email, 'cliente@example.com')
        self.assertEqual(user.profile, '')
        self.user_repo_mock.save.assert_called_once()
        self.assertEqual(self.user_repo_mock.save.call_args.kwargs['password'], 'segredo1')

    def test_criar_usuario_com_email_duplicado_falha(self):
        # ARRANGE
        self.user_repo_mock.get_by_email.return_value = User(email='cliente@example.com', phone_number='1')

        # ACT & ASSERT
        with self.assertRaises(EmailAlreadyInUseError):
            self.use_case.create(self.dados)
        self.user_repo_mock.save.assert_not_called()

    def test_registro_publico_sempre_cria_papel_user(self):
        self.user_repo_mock.get_by_email.return_value = None
        self.user_repo_mock.save.side_effect = lambda user, password=None: user

        user = self.use_case.register({**self.dados, 'role': Role.ADMIN.value})

        self.assertEqual(user.role, Role.USER.value)

    def test_listagem_rejeita_paginacao_invalida(self):
        with self.assertRaises(InvalidDataError):
            self.use_case.list(page=0)
        with self.assertRaises(InvalidDataError):
            self.use_case.list(limit=101)
        with self.assertRaises(InvalidDataError):
            self.use_case.list(sort_by='password')
        self.user_repo_mock.list.assert_not_called()

    def test_listagem_descarta_filtros_vazios(self):
        self.user_repo_mock.list.return_value = Page(items=[], total=0, page=1, limit=100)

        self.use_case.list(filters={'email': 'abc', 'role': None}, page=1, limit=100)

        self.user_repo_mock.list.assert_called_once_with({'email': 'abc'}, 1, 100, 'created_at', 'DESC')

    def test_atualizar_para_email_de_outro_usuario_falha(self):
        # ARRANGE
        atual = User(id='u1', email='a@example.com', phone_number='1')
        outro = User(id='u2', email='b@example.com', phone_number='2')
        self.user_repo_mock.get_by_id.return_value = atual
        self.user_repo_mock.get_by_email.return_value = outro

        # ACT & ASSERT
        with self.assertRaises(EmailAlreadyInUseError):
            self.use_case.update('u1', {'email': 'b@example.com'})

    def test_buscar_usuario_inexistente(self):
        self.user_repo_mock.get_by_id.return_value = None
        with self.assertRaises(UserNotFoundError):
            self.use_case.get('nao-existe')


class TestManageCategoriesUseCase(unittest.TestCase):

    def setUp(self):
        self.category_repo_mock = Mock()
        self.use_case = ManageCategoriesUseCase(self.category_repo_mock)

    def test_slug_derivado_do_nome(self):
        self.category_repo_mock.get_by_slug.return_value = None
        self.category_repo_mock.save.side_effect = lambda category: category

        category = self.use_case.create({'name': 'Sports Bras'})

        self.assertEqual(category.slug, 'sports-bras')
        self.assertEqual(category.status, 'ACTIVE')

    def test_slug_duplicado_gera_conflito(self):
        self.category_repo_mock.get_by_slug.return_value = Category(name='Men', slug='men')

        with self.assertRaises(SlugAlreadyExistsError):
            self.use_case.create({'name': 'Men', 'slug': 'men'})
        self.category_repo_mock.save.assert_not_called()


class TestManageProductsUseCase(unittest.TestCase):

    def setUp(self):
        self.product_repo_mock = Mock()
        self.product_repo_mock.sku_exists.return_value = False
        self.product_repo_mock.save.side_effect = lambda product: product
        self.use_case = ManageProductsUseCase(self.product_repo_mock, Mock(), Mock(), Mock())
        self.product_repo_mock.get_by_id.return_value = Product(id='p1', product_code='P-1', category_id='c1')

    def test_variacao_sem_sku_e_rejeitada(self):
        with self.assertRaises(InvalidDataError):
            self.use_case.update('p1', {'variants': [{'price': Decimal('12.00')}]})
        self.product_repo_mock.save.assert_not_called()

    def test_variacao_sem_preco_e_rejeitada(self):
        with self.assertRaises(InvalidDataError):
            self.use_case.update('p1', {'variants': [{'sku': 'SKU-1'}]})

    def test_sku_repetido_no_mesmo_payload(self):
        variantes = [{'sku': 'SKU-1', 'price': Decimal('10')}, {'sku': 'SKU-1', 'price': Decimal('12')}]
        with self.assertRaises(ConflictError):
            self.use_case.update('p1', {'variants': variantes})

    def test_substituir_variacoes(self):
        product = self.use_case.update('p1', {'variants': [{'sku': 'SKU-B', 'price': Decimal('12.5')}]})

        self.assertEqual([v.sku for v in product.variants], ['SKU-B'])
        self.assertEqual(product.variants[0].price, Decimal('12.50'))


class TestResolvePriceUseCase(unittest.TestCase):
    """
    Cenários de resolução de preço: prioridade, desempate por variação,
    janela de vigência e piso zero.
    """

    def setUp(self):
        self.product_repo_mock = Mock()
        self.price_rule_repo_mock = Mock()
        self.use_case = ResolvePriceUseCase(self.product_repo_mock, self.price_rule_repo_mock, clock=fixed_clock)

        self.variante = ProductVariant(id='v1', sku='SKU-1', price=Decimal('100.00'), product_id='p1')
        self.variante_promo = ProductVariant(
            id='v2', sku='SKU-2', price=Decimal('80.00'), sale_price=Decimal('60.00'), product_id='p1',
        )
        self.produto = Product(
            id='p1', product_code='P-1', category_id='c1', variants=[self.variante, self.variante_promo],
        )
        self.product_repo_mock.get_by_id.return_value = self.produto

    def test_sem_regras_retorna_preco_base(self):
        self.price_rule_repo_mock.find_for_target.return_value = []

        result = self.use_case.execute('p1', variant_id='v1')

        self.assertEqual(result['base_price'], Decimal('100.00'))
        self.assertEqual(result['final_price'], Decimal('100.00'))
        self.assertIsNone(result['rule'])

    def test_maior_prioridade_vence(self):
        # ARRANGE
        baixa = ProductPriceRule(type='percent', value=Decimal('50'), product_id='p1', priority=1)
        alta = ProductPriceRule(type='percent', value=Decimal('10'), product_id='p1', priority=5)
        self.price_rule_repo_mock.find_for_target.return_value = [baixa, alta]

        # ACT
        result = self.use_case.execute('p1', variant_id='v1')

        # ASSERT
        self.assertIs(result['rule'], alta)
        self.assertEqual(result['final_price'], Decimal('90.00'))

    def test_empate_de_prioridade_favorece_regra_da_variacao(self):
        do_produto = ProductPriceRule(type='fixed', value=Decimal('5'), product_id='p1', priority=2)
        da_variacao = ProductPriceRule(type='fixed', value=Decimal('20'), variant_id='v1', priority=2)
        self.price_rule_repo_mock.find_for_target.return_value = [do_produto, da_variacao]

        result = self.use_case.execute('p1', variant_id='v1')

        self.assertIs(result['rule'], da_variacao)
        self.assertEqual(result['final_price'], Decimal('80.00'))

    def test_regra_fora_da_vigencia_e_ignorada(self):
        expirada = ProductPriceRule(
            type='percent', value=Decimal('30'), product_id='p1', priority=10,
            start_at=NOW - timedelta(days=10), end_at=NOW - timedelta(days=1),
        )
        futura = ProductPriceRule(
            type='percent', value=Decimal('30'), product_id='p1', priority=10,
            start_at=NOW + timedelta(days=1),
        )
        self.price_rule_repo_mock.find_for_target.return_value = [expirada, futura]

        result = self.use_case.execute('p1', variant_id='v1')

        self.assertIsNone(result['rule'])
        self.assertEqual(result['final_price'], Decimal('100.00'))

    def test_desconto_fixo_nunca_fica_negativo(self):
        regra = ProductPriceRule(type='fixed', value=Decimal('500'), product_id='p1')
        self.price_rule_repo_mock.find_for_target.return_value = [regra]

        result = self.use_case.execute('p1', variant_id='v1')

        self.assertEqual(result['final_price'], Decimal('0.00'))

    def test_sem_variacao_usa_menor_preco_disponivel(self):
        self.price_rule_repo_mock.find_for_target.return_value = []

        result = self.use_case.execute('p1')

        self.assertEqual(result['base_price'], Decimal('60.00'))
        self.price_rule_repo_mock.find_for_target.assert_called_once_with('p1', None)


class TestManagePriceRulesUseCase(unittest.TestCase):

    def setUp(self):
        self.price_rule_repo_mock = Mock()
        self.product_repo_mock = Mock()
        self.use_case = ManagePriceRulesUseCase(self.price_rule_repo_mock, self.product_repo_mock)

    def test_regra_com_produto_e_variacao_e_invalida(self):
        with self.assertRaises(InvalidDataError):
            self.use_case.create({'product_id': 'p1', 'variant_id': 'v1', 'value': '10'})

    def test_regra_sem_alvo_e_invalida(self):
        with self.assertRaises(InvalidDataError):
            self.use_case.create({'value': '10'})

    def test_percentual_acima_de_cem_e_invalido(self):
        with self.assertRaises(InvalidDataError):
            self.use_case.create({'product_id': 'p1', 'type': 'percent', 'value': '150'})

    def test_regra_de_produto_valida_e_salva(self):
        self.product_repo_mock.get_by_id.return_value = Product(id='p1', product_code='P', category_id='c')
        self.price_rule_repo_mock.save.side_effect = lambda rule: rule

        rule = self.use_case.create({'product_id': 'p1', 'value': '12.5', 'priority': 3})

        self.assertEqual(rule.type, 'percent')
        self.assertEqual(rule.value, Decimal('12.50'))
        self.assertEqual(rule.priority, 3)


class TestCreateOrderUseCase(unittest.TestCase):

    def setUp(self):
        self.order_repo_mock = Mock()
        self.user_repo_mock = Mock()
        self.order_repo_mock.save.side_effect = lambda order: order
        self.use_case = CreateOrderUseCase(self.order_repo_mock, self.user_repo_mock, clock=fixed_clock)
        self.itens = [
            {'product_id': 'p1', 'product_name': 'Top', 'quantity': 2, 'unit_price': '19.90'},
            {'product_id': 'p2', 'product_name': 'Bag', 'quantity': 1, 'unit_price': '5.05'},
        ]

    def test_criar_pedido_calcula_total_e_inicia_pendente(self):
        # ARRANGE
        self.user_repo_mock.get_by_id.return_value = User(id='u1', email='a@example.com', phone_number='1')

        # ACT
        order = self.use_case.execute('u1', self.itens, shipping_address={'full_name': 'Ana'})

        # ASSERT
        self.assertEqual(order.status, OrderStatus.PENDING.value)
        self.assertEqual(order.total, Decimal('44.85'))
        self.assertEqual(order.items[0].total_price, Decimal('39.80'))
        self.assertEqual(len(order.tracking_history), 1)
        self.assertIsNone(order.tracking_history[0].from_status)
        self.assertEqual(order.tracking_history[0].to_status, 'PENDING')
        self.order_repo_mock.save.assert_called_once_with(order)

    def test_pedido_para_usuario_inexistente_falha(self):
        self.user_repo_mock.get_by_id.return_value = None
        with self.assertRaises(UserNotFoundError):
            self.use_case.execute('u404', self.itens)

    def test_pedido_sem_itens_falha(self):
        self.user_repo_mock.get_by_id.return_value = User(id='u1', email='a@example.com', phone_number='1')
        with self.assertRaises(InvalidDataError):
            self.use_case.execute('u1', [])


class TestManageOrdersUseCase(unittest.TestCase):

    def setUp(self):
        self.order_repo_mock = Mock()
        self.order_repo_mock.save.side_effect = lambda order: order
        self.use_case = ManageOrdersUseCase(self.order_repo_mock, clock=fixed_clock)

        self.admin = User(id='admin', email='admin@example.com', phone_number='0', role=Role.ADMIN.value)
        self.cliente = User(id='u1', email='a@example.com', phone_number='1')
        self.pedido = Order(
            id='o1',
            user_id='u1',
            items=[OrderItem(product_id='p1', product_name='Top', quantity=1, unit_price=Decimal('10.00'))],
            tracking_history=[TrackingEntry(to_status='PENDING', changed_at=NOW - timedelta(hours=2))],
        )
        self.order_repo_mock.get_by_id.return_value = self.pedido
        self.order_repo_mock.update_locked.side_effect = self._aplicar_com_lock

    def _aplicar_com_lock(self, order_id, mutate):
        if order_id != self.pedido.id:
            raise OrderNotFoundError()
        mutate(self.pedido)
        return self.pedido

    def test_transicao_valida_registra_historico(self):
        # ACT
        order = self.use_case.change_status('o1', 'CONFIRMED', self.admin, note='Pagamento ok')

        # ASSERT
        self.assertEqual(order.status, 'CONFIRMED')
        ultimo = order.tracking_history[-1]
        self.assertEqual((ultimo.from_status, ultimo.to_status), ('PENDING', 'CONFIRMED'))
        self.assertEqual(ultimo.changed_by, 'admin')
        self.assertEqual(ultimo.note, 'Pagamento ok')

    def test_transicao_invalida_falha(self):
        with self.assertRaises(InvalidStatusTransitionError):
            self.use_case.change_status('o1', 'DELIVERED', self.admin)
        self.assertEqual(self.pedido.status, 'PENDING')
        self.assertEqual(len(self.pedido.tracking_history), 1)

    def test_status_inexistente_falha(self):
        with self.assertRaises(InvalidStatusError):
            self.use_case.change_status('o1', 'LOST', self.admin)

    def test_pedido_cancelado_e_final(self):
        self.pedido.status = 'CANCELLED'
        with self.assertRaises(InvalidStatusTransitionError):
            self.use_case.change_status('o1', 'CONFIRMED', self.admin)

    def test_cliente_nao_altera_status(self):
        with self.assertRaises(PermissionDeniedError):
            self.use_case.change_status('o1', 'CONFIRMED', self.cliente)

    def test_cliente_nao_acessa_pedido_de_outro(self):
        outro = User(id='u2', email='b@example.com', phone_number='2')
        with self.assertRaises(PermissionDeniedError):
            self.use_case.get('o1', outro)

    def test_listagem_de_cliente_e_restrita_aos_proprios_pedidos(self):
        self.use_case.list(self.cliente, page=1, limit=10, user_id='u2')
        self.order_repo_mock.list.assert_called_once_with(page=1, limit=10, user_id='u1', status=None)

    def test_historico_calcula_duracao_de_cada_etapa(self):
        self.pedido.tracking_history.append(TrackingEntry(
            from_status='PENDING', to_status='CONFIRMED', changed_at=NOW - timedelta(minutes=30),
        ))

        history = self.use_case.status_history('o1', self.cliente)

        self.assertEqual([h['duration_seconds'] for h in history], [5400, 1800])

    def test_mudanca_de_status_usa_leitura_com_lock(self):
        # ACT
        self.use_case.change_status('o1', 'CANCELLED', self.admin)

        # ASSERT
        self.order_repo_mock.update_locked.assert_called_once()
        self.order_repo_mock.get_by_id.assert_not_called()
        self.order_repo_mock.save.assert_not_called()

    def test_mesmo_status_e_rejeitado(self):
        with self.assertRaises(InvalidStatusTransitionError):
            self.use_case.change_status('o1', 'PENDING', self.admin)

    def test_pedido_inexistente_na_mudanca_de_status(self):
        with self.assertRaises(OrderNotFoundError):
            self.use_case.change_status('o9', 'CONFIRMED', self.admin)

    def test_atualizacao_aplica_endereco_e_status_na_mesma_gravacao(self):
        order = self.use_case.update(
            'o1', {'shipping_address': {'full_name': 'Ana'}, 'status': 'CONFIRMED'}, self.admin,
        )

        self.assertEqual(order.shipping_address, {'full_name': 'Ana'})
        self.assertEqual(order.status, 'CONFIRMED')
        self.order_repo_mock.update_locked.assert_called_once()


class TestPaymentsUseCase(unittest.TestCase):

    def setUp(self):
        self.gateway_mock = Mock()
        self.event_repo_mock = Mock()
        self.use_case = PaymentsUseCase(self.gateway_mock, self.event_repo_mock)

    def test_webhook_repetido_e_sinalizado(self):
        self.event_repo_mock.record.return_value = False

        result = self.use_case.handle_webhook({'id': 'WH-1', 'event_type': 'PAYMENT.CAPTURE.COMPLETED'})

        self.assertEqual(result, {'received': True, 'duplicate': True})

    def test_webhook_sem_id_nao_registra_evento(self):
        result = self.use_case.handle_webhook({'foo': 'bar'})

        self.assertEqual(result, {'received': True, 'duplicate': False})
        self.event_repo_mock.record.assert_not_called()

    def test_webhook_com_resource_que_nao_e_objeto(self):
        self.event_repo_mock.record.return_value = True

        result = self.use_case.handle_webhook({'id': 'WH-1', 'resource': 'x'})

        self.assertEqual(result, {'received': True, 'duplicate': False})
        evento = self.event_repo_mock.record.call_args.args[0]
        self.assertIsNone(evento.order_id)
        self.assertIsNone(evento.resource_status)

    def test_webhook_converte_campos_livres_em_texto_limitado(self):
        self.event_repo_mock.record.return_value = True

        self.use_case.handle_webhook({
            'id': 42,
            'event_type': ['PAYMENT'] * 50,
            'resource': {'status': 'X' * 80, 'custom_id': 7},
        })

        evento = self.event_repo_mock.record.call_args.args[0]
        self.assertEqual(evento.event_id, '42')
        self.assertIsInstance(evento.event_type, str)
        self.assertEqual(len(evento.event_type), 100)
        self.assertEqual(len(evento.resource_status), 50)
        self.assertEqual(evento.order_id, '7')

    def test_captura_delega_ao_gateway(self):
        self.gateway_mock.capture_order.return_value = {'id': 'abc', 'status': 'COMPLETED'}

        self.assertEqual(self.use_case.capture_paypal_order('abc')['status'], 'COMPLETED')
        self.gateway_mock.capture_order.assert_called_once_with('abc')


class TestHealthCheckUseCase(unittest.TestCase):

    def test_timestamp_em_milissegundos(self):
        result = HealthCheckUseCase(clock=lambda: 1700000000.5).execute()
        self.assertEqual(result, {'status': 'ok', 'timestamp': 1700000000500})


if __name__ == '__main__':
    unittest.main()
