import uuid

from django.conf import settings
from django.db import models

from storefront.core.entities import OrderStatus

ORDER_STATUS_CHOICES = [(status.value, status.value) for status in OrderStatus]


class Order(models.Model):
    """
    Modelo para pedidos de compra.
    Itens, endereço e pagamento são snapshots em JSON no momento da compra.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='orders',
        verbose_name="Cliente",
    )
    total = models.DecimalField(max_digits=12, decimal_places=2, default=0, verbose_name="Total do Pedido")
    status = models.CharField(
        max_length=20,
        choices=ORDER_STATUS_CHOICES,
        default=OrderStatus.PENDING.value,
        db_index=True,
        verbose_name="Status",
    )

    items = models.JSONField(default=list, verbose_name="Itens")
    shipping_address = models.JSONField(blank=True, null=True, verbose_name="Endereço de Entrega")
    payment_info = models.JSONField(blank=True, null=True, verbose_name="Informações de Pagamento")
    # Lista de {from_status, to_status, changed_at, changed_by, note}
    tracking_history = models.JSONField(default=list, blank=True, verbose_name="Histórico de Status")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Pedido"
        verbose_name_plural = "Pedidos"
        db_table = 'orders'
        ordering = ['-created_at']

    def __str__(self):
        return f"Pedido {self.id} - {self.status}"
