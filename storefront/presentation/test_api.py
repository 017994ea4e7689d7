from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from storefront.catalog.models import Category, Color, Variant, ProductVariant
from storefront.core.entities import Role
from storefront.orders.models import Order
from storefront.payments.models import PaymentEvent


class ApiTestCase(APITestCase):
    """Base com um administrador e um cliente já cadastrados."""

    def setUp(self):
        User = get_user_model()
        self.admin = User.objects.create_superuser(
            email='admin@example.com', password='Admin@123456', phone_number='5511000000000',
        )
        self.cliente = User.objects.create_user(
            email='cliente@example.com', password='Cliente@123',
            phone_number='5511999999999', role=Role.USER.value,
        )


# ====================================================================
# SAÚDE, ENVELOPE E ERROS
# ====================================================================

class HealthApiTests(ApiTestCase):

    def test_get_health_retorna_envelope(self):
        response = self.client.get('/health')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['message'], 'Success')
        self.assertEqual(body['data']['status'], 'ok')
        self.assertIsInstance(body['data']['timestamp'], int)

    def test_head_health_sem_corpo_de_envelope(self):
        response = self.client.head('/health')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.content, b'')


class ErrorPayloadTests(ApiTestCase):

    def test_rota_protegida_sem_token(self):
        response = self.client.get('/users/me')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        body = response.json()
        self.assertEqual(body['statusCode'], 401)
        self.assertEqual(body['error'], 'Unauthorized')
        self.assertEqual(body['path'], '/users/me')
        self.assertEqual(body['method'], 'GET')
        self.assertIn('timestamp', body)
        self.assertNotIn('success', body)

    def test_papel_insuficiente_retorna_403(self):
        self.client.force_authenticate(self.cliente)

        response = self.client.get('/users')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.json()['statusCode'], 403)

    def test_paginacao_invalida_retorna_400(self):
        self.client.force_authenticate(self.admin)

        response = self.client.get('/users', {'page': 0, 'limit': 101})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        body = response.json()
        self.assertEqual(body['message'], 'Validation failed')
        self.assertIn('page', body['errors'])
        self.assertIn('limit', body['errors'])

    def test_recurso_inexistente_retorna_404(self):
        response = self.client.get('/categories/0b7a4c8e-3b58-4a0a-9d1c-4a1b2a0c9e11')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()['statusCode'], 404)


# ====================================================================
# AUTENTICAÇÃO E USUÁRIOS
# ====================================================================

class AuthApiTests(ApiTestCase):

    def test_registro_retorna_usuario_e_tokens(self):
        response = self.client.post('/auth/register', {
            'email': 'Nova@Example.com', 'password': 'senha-forte', 'phone_number': '5511988887777',
        })

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.json()['data']
        self.assertEqual(data['user']['email'], 'nova@example.com')
        self.assertEqual(data['user']['role'], Role.USER.value)
        self.assertIn('access', data['tokens'])
        self.assertNotIn('password', data['user'])

    def test_registro_com_email_repetido_retorna_409(self):
        response = self.client.post('/auth/register', {
            'email': 'cliente@example.com', 'password': 'senha-forte', 'phone_number': '5511988887777',
        })

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_login_e_acesso_ao_perfil(self):
        login = self.client.post('/auth/login', {'email': 'cliente@example.com', 'password': 'Cliente@123'})
        self.assertEqual(login.status_code, status.HTTP_200_OK)
        access = login.json()['data']['access']

        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')
        response = self.client.get('/users/me')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['email'], 'cliente@example.com')

    def test_login_com_senha_errada(self):
        response = self.client.post('/auth/login', {'email': 'cliente@example.com', 'password': 'errada'})

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


# ====================================================================
# CATÁLOGO
# ====================================================================

class CategoryApiTests(ApiTestCase):

    def test_listagem_e_publica(self):
        Category.objects.create(name='Women', slug='women')

        response = self.client.get('/categories')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c['slug'] for c in response.json()['data']], ['women'])

    def test_slug_repetido_retorna_409(self):
        self.client.force_authenticate(self.admin)
        self.client.post('/categories', {'name': 'Sports Bras'})

        response = self.client.post('/categories', {'name': 'Outra', 'slug': 'sports-bras'})

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.json()['message'], 'Slug already exists.')
        self.assertEqual(Category.objects.filter(slug='sports-bras').count(), 1)

    def test_cliente_nao_cria_categoria(self):
        self.client.force_authenticate(self.cliente)

        response = self.client.post('/categories', {'name': 'Women'})

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


# ====================================================================
# PEDIDOS
# ====================================================================

class OrderApiTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.payload = {
            'items': [
                {
                    'product_id': '0b7a4c8e-3b58-4a0a-9d1c-4a1b2a0c9e11',
                    'product_name': 'Top Fitness',
                    'quantity': 2,
                    'unit_price': '19.90',
                },
            ],
            'shipping_address': {'full_name': 'Ana', 'phone': '5511999999999', 'address_line': 'Rua A, 1'},
        }

    def _criar_pedido(self):
        self.client.force_authenticate(self.cliente)
        response = self.client.post('/orders', self.payload)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.json()['data']

    def test_criacao_de_pedido(self):
        pedido = self._criar_pedido()

        self.assertEqual(pedido['status'], 'PENDING')
        self.assertEqual(pedido['total'], '39.80')
        self.assertEqual(pedido['user_id'], str(self.cliente.id))
        self.assertEqual(len(pedido['tracking_history']), 1)
        self.assertEqual(Order.objects.count(), 1)

    def test_preco_unitario_invalido_retorna_400(self):
        self.client.force_authenticate(self.cliente)
        self.payload['items'][0]['unit_price'] = '19.9'

        response = self.client.post('/orders', self.payload)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_meus_pedidos(self):
        self._criar_pedido()

        response = self.client.get('/orders/my-orders')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual(data['meta']['total'], 1)
        self.assertEqual(len(data['items']), 1)

    def test_mudanca_de_status_e_historico(self):
        pedido = self._criar_pedido()
        self.client.force_authenticate(self.admin)

        response = self.client.post(f"/orders/{pedido['id']}/status", {'status': 'CONFIRMED', 'note': 'ok'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['status'], 'CONFIRMED')

        history = self.client.get(f"/orders/{pedido['id']}/status-history").json()['data']
        self.assertEqual([h['to_status'] for h in history], ['PENDING', 'CONFIRMED'])
        self.assertEqual(history[1]['from_status'], 'PENDING')
        self.assertEqual(history[1]['note'], 'ok')

    def test_transicao_invalida_retorna_400(self):
        pedido = self._criar_pedido()
        self.client.force_authenticate(self.admin)

        response = self.client.post(f"/orders/{pedido['id']}/status", {'status': 'DELIVERED'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Order.objects.get().status, 'PENDING')

    def test_cliente_nao_altera_status(self):
        pedido = self._criar_pedido()

        response = self.client.post(f"/orders/{pedido['id']}/status", {'status': 'CANCELLED'})

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


# ====================================================================
# PAGAMENTOS
# ====================================================================

class PaymentApiTests(ApiTestCase):

    def test_criacao_e_captura_no_paypal(self):
        self.client.force_authenticate(self.cliente)

        created = self.client.post('/payments/paypal/create', {'amount': '39.80', 'currency': 'USD'})
        captured = self.client.post('/payments/paypal/capture/PAY-123')

        self.assertEqual(created.json()['data'], {'id': 'paypal-order-id', 'status': 'CREATED'})
        self.assertEqual(captured.json()['data'], {'id': 'PAY-123', 'status': 'COMPLETED'})

    def test_webhook_e_idempotente(self):
        evento = {
            'id': 'WH-1',
            'event_type': 'PAYMENT.CAPTURE.COMPLETED',
            'resource': {'status': 'COMPLETED', 'custom_id': 'pedido-1'},
        }

        primeiro = self.client.post('/payments/paypal/webhook', evento)
        segundo = self.client.post('/payments/paypal/webhook', evento)

        self.assertEqual(primeiro.status_code, status.HTTP_200_OK)
        self.assertEqual(primeiro.json()['data'], {'received': True, 'duplicate': False})
        self.assertEqual(segundo.json()['data'], {'received': True, 'duplicate': True})
        self.assertEqual(PaymentEvent.objects.filter(event_id='WH-1').count(), 1)

    def test_webhook_com_resource_invalido_e_aceito(self):
        response = self.client.post('/payments/paypal/webhook', {'id': 'WH-2', 'resource': 'x'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data'], {'received': True, 'duplicate': False})
        evento = PaymentEvent.objects.get(event_id='WH-2')
        self.assertIsNone(evento.order_id)


# ====================================================================
# ADMINISTRAÇÃO DE USUÁRIOS
# ====================================================================

class UserAdminApiTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.client.force_authenticate(self.admin)

    def test_crud_de_usuario(self):
        # Criação
        response = self.client.post('/users', {
            'email': 'novo@example.com', 'phone_number': '5511977776666', 'password': 'abc123', 'role': 'USER',
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user_id = response.json()['data']['id']

        # Listagem paginada
        listing = self.client.get('/users', {'limit': 2, 'sort_by': 'email', 'sort_order': 'ASC'}).json()['data']
        self.assertEqual(listing['meta']['total'], 3)
        self.assertEqual(listing['meta']['total_pages'], 2)
        self.assertEqual(len(listing['items']), 2)

        # Atualização
        response = self.client.patch(f'/users/{user_id}', {'role': 'ADMIN'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['role'], 'ADMIN')

        # Remoção
        self.assertEqual(self.client.delete(f'/users/{user_id}').status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.get(f'/users/{user_id}').status_code, status.HTTP_404_NOT_FOUND)

    def test_cliente_so_ve_o_proprio_perfil(self):
        self.client.force_authenticate(self.cliente)

        self.assertEqual(self.client.get(f'/users/{self.cliente.id}').status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(f'/users/{self.admin.id}').status_code, status.HTTP_403_FORBIDDEN)


# ====================================================================
# CORES, VARIAÇÕES, PRODUTOS E REGRAS DE PREÇO
# ====================================================================

class ColorAndVariantApiTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.client.force_authenticate(self.admin)

    def test_crud_de_cor(self):
        response = self.client.post('/colors', {'name': 'Blue', 'hex_code': '#0000FF'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        color_id = response.json()['data']['id']

        response = self.client.patch(f'/colors/{color_id}', {'image_url': 'https://cdn.example.com/blue.png'})
        self.assertEqual(response.json()['data']['image_url'], 'https://cdn.example.com/blue.png')

        self.assertEqual(self.client.post('/colors', {'name': 'Blue'}).status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(self.client.delete(f'/colors/{color_id}').status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.get(f'/colors/{color_id}').status_code, status.HTTP_404_NOT_FOUND)

    def test_hex_invalido_retorna_400(self):
        response = self.client.post('/colors', {'name': 'Blue', 'hex_code': 'blue'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('hex_code', response.json()['errors'])

    def test_crud_de_variacao(self):
        response = self.client.post('/variants', {'name': 'L'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        variant_id = response.json()['data']['id']

        response = self.client.patch(f'/variants/{variant_id}', {'name': 'XL'})
        self.assertEqual(response.json()['data']['name'], 'XL')

        self.client.logout()
        self.assertEqual([v['name'] for v in self.client.get('/variants').json()['data']], ['XL'])

        self.client.force_authenticate(self.admin)
        self.assertEqual(self.client.delete(f'/variants/{variant_id}').status_code, status.HTTP_204_NO_CONTENT)


class ProductApiTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.category = Category.objects.create(name='Women', slug='women')
        self.red = Color.objects.create(name='Red', hex_code='#FF0000')
        self.m = Variant.objects.create(name='M')
        self.client.force_authenticate(self.admin)

        response = self.client.post('/products', {
            'product_code': 'TOP-001',
            'category_id': str(self.category.id),
            'variants': [
                {'sku': 'SKU-A', 'price': '10.00', 'color_id': str(self.red.id), 'variant_id': str(self.m.id)},
            ],
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.product = response.json()['data']

    def test_produto_criado_com_variacao(self):
        self.assertEqual(self.product['min_price'], '10.00')
        self.assertEqual([v['sku'] for v in self.product['variants']], ['SKU-A'])

        self.client.logout()
        listing = self.client.get('/products', {'search': 'TOP'}).json()['data']
        self.assertEqual(listing['meta']['total'], 1)

    def test_patch_com_variacao_incompleta_retorna_400(self):
        response = self.client.patch(f"/products/{self.product['id']}", {'variants': [{'price': '12.00'}]})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(ProductVariant.objects.get().sku, 'SKU-A')

    def test_patch_troca_sku_mantendo_cor_e_tamanho(self):
        response = self.client.patch(f"/products/{self.product['id']}", {
            'variants': [
                {'sku': 'SKU-B', 'price': '12.00', 'color_id': str(self.red.id), 'variant_id': str(self.m.id)},
            ],
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([v['sku'] for v in response.json()['data']['variants']], ['SKU-B'])
        self.assertEqual(list(ProductVariant.objects.values_list('sku', flat=True)), ['SKU-B'])

    def test_patch_sem_variacoes_mantem_as_atuais(self):
        response = self.client.patch(f"/products/{self.product['id']}", {'is_featured': True})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.json()['data']['is_featured'])
        self.assertEqual(ProductVariant.objects.count(), 1)

    def test_preco_com_regra_de_desconto(self):
        url = f"/products/{self.product['id']}/price"
        self.assertEqual(self.client.get(url).json()['data']['final_price'], '10.00')

        response = self.client.post('/price-rules', {
            'product_id': self.product['id'], 'type': 'percent', 'value': '10.00', 'priority': 1,
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        rule_id = response.json()['data']['id']

        self.client.logout()
        price = self.client.get(url).json()['data']
        self.assertEqual(price['base_price'], '10.00')
        self.assertEqual(price['final_price'], '9.00')
        self.assertEqual(price['rule']['id'], rule_id)

        self.client.force_authenticate(self.admin)
        rules = self.client.get('/price-rules', {'product_id': self.product['id']}).json()['data']
        self.assertEqual([r['id'] for r in rules], [rule_id])
        self.assertEqual(self.client.delete(f'/price-rules/{rule_id}').status_code, status.HTTP_204_NO_CONTENT)

    def test_regras_de_preco_exigem_admin(self):
        self.client.force_authenticate(self.cliente)

        self.assertEqual(self.client.get('/price-rules').status_code, status.HTTP_403_FORBIDDEN)

    def test_categoria_em_uso_nao_pode_ser_removida(self):
        response = self.client.delete(f'/categories/{self.category.id}')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.json()['message'], 'Category is in use by products and cannot be deleted.')

    def test_remocao_de_produto(self):
        url = f"/products/{self.product['id']}"

        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(ProductVariant.objects.exists())
