from django.apps import AppConfig


class PresentationConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'storefront.presentation'
    label = 'presentation'
    verbose_name = 'API REST'
