import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='PaymentEvent',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('event_id', models.CharField(max_length=255, unique=True)),
                ('event_type', models.CharField(blank=True, max_length=100, null=True)),
                ('order_id', models.CharField(blank=True, db_index=True, max_length=255, null=True)),
                ('resource_status', models.CharField(blank=True, max_length=50, null=True)),
                ('raw_data', models.JSONField(default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Evento de Pagamento',
                'verbose_name_plural': 'Eventos de Pagamento',
                'db_table': 'payment_events',
                'ordering': ['-created_at'],
            },
        ),
    ]
