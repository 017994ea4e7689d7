import logging
from typing import Any, Dict

from django.conf import settings

from storefront.core.ports import IPaymentGateway

logger = logging.getLogger(__name__)


# ====================================================================
# GATEWAYS: Implementações concretas de serviços externos.
# ====================================================================

class PayPalGatewayStub(IPaymentGateway):
    """
    Gateway PayPal simulado: não faz chamadas HTTP e devolve respostas fixas
    no formato da API de Orders v2 (id + status).
    """

    def __init__(self, mode: str = None):
        self.mode = mode or getattr(settings, 'PAYPAL_MODE', 'sandbox')
        if not getattr(settings, 'PAYPAL_CLIENT_ID', ''):
            logger.info("PAYPAL_CLIENT_ID não configurado; usando o gateway simulado (%s).", self.mode)

    def create_order(self, order_data: Dict[str, Any]) -> Dict[str, Any]:
        logger.info("[PayPal %s] criando ordem: %s", self.mode, order_data)
        return {'id': 'paypal-order-id', 'status': 'CREATED'}

    def capture_order(self, order_id: str) -> Dict[str, Any]:
        logger.info("[PayPal %s] capturando ordem %s", self.mode, order_id)
        return {'id': order_id, 'status': 'COMPLETED'}
