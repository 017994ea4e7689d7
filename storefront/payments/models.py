import uuid

from django.db import models


class PaymentEvent(models.Model):
    """Evento de webhook do PayPal já recebido. O event_id único garante idempotência."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event_id = models.CharField(max_length=255, unique=True)
    event_type = models.CharField(max_length=100, blank=True, null=True)
    order_id = models.CharField(max_length=255, blank=True, null=True, db_index=True)
    resource_status = models.CharField(max_length=50, blank=True, null=True)
    raw_data = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Evento de Pagamento"
        verbose_name_plural = "Eventos de Pagamento"
        db_table = 'payment_events'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.event_type or 'evento'} {self.event_id}"
