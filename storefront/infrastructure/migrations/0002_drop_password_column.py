from django.db import migrations


class Migration(migrations.Migration):
    """Remove a coluna user.password; o hash fica apenas em user.password_hash."""

    dependencies = [
        ('infrastructure', '0001_initial'),
    ]

    operations = [
        migrations.RemoveField(
            model_name='user',
            name='legacy_password',
        ),
    ]
