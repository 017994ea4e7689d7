from django.db import migrations, models

INDEX_NAME = 'idx_orders_tracking_history'


def create_gin_index(apps, schema_editor):
    # Índices GIN sobre JSONB só existem no PostgreSQL.
    if schema_editor.connection.vendor != 'postgresql':
        return
    schema_editor.execute(
        f'CREATE INDEX IF NOT EXISTS "{INDEX_NAME}" ON "orders" USING gin ("tracking_history")'
    )


def drop_gin_index(apps, schema_editor):
    if schema_editor.connection.vendor != 'postgresql':
        return
    schema_editor.execute(f'DROP INDEX IF EXISTS "{INDEX_NAME}"')


class Migration(migrations.Migration):

    dependencies = [
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='order',
            name='tracking_history',
            field=models.JSONField(blank=True, default=list, verbose_name='Histórico de Status'),
        ),
        migrations.RunPython(create_gin_index, drop_gin_index),
    ]
