from django.conf import settings
from django.core.management.base import BaseCommand

from storefront.infrastructure.models import User
from storefront.core.entities import Role


class Command(BaseCommand):
    help = 'Cria (ou promove) o usuário administrador definido em ADMIN_EMAIL/ADMIN_PASSWORD'

    def add_arguments(self, parser):
        parser.add_argument('--email', default=settings.ADMIN_EMAIL)
        parser.add_argument('--password', default=settings.ADMIN_PASSWORD)
        parser.add_argument('--phone', default=settings.ADMIN_PHONE)

    def handle(self, *args, **options):
        email = options['email'].lower()
        admin = User.objects.filter(email=email).first()

        if admin is None:
            User.objects.create_superuser(
                email,
                options['password'],
                phone_number=options['phone'],
                profile='Admin',
            )
            self.stdout.write(self.style.SUCCESS(f'Administrador criado: {email}'))
            return

        if admin.role != Role.ADMIN.value or not admin.is_staff:
            admin.role = Role.ADMIN.value
            admin.is_staff = True
            admin.save(update_fields=['role', 'is_staff', 'updated_at'])
            self.stdout.write(self.style.SUCCESS(f'Usuário {email} promovido a ADMIN'))
        else:
            self.stdout.write(f'Administrador já existe: {email}')
