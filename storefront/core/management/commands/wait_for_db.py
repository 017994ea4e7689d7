"""
Management command para aguardar o banco de dados estar disponível.
"""
import time
from django.db import connections
from django.db.utils import OperationalError
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    """Django command para pausar a execução até o banco de dados estar disponível."""

    help = 'Aguarda até que a conexão padrão do banco de dados responda.'

    def add_arguments(self, parser):
        parser.add_argument('--attempts', type=int, default=30)
        parser.add_argument('--interval', type=float, default=1.0)

    def handle(self, *args, **options):
        self.stdout.write('Aguardando pelo banco de dados...')
        for attempt in range(1, options['attempts'] + 1):
            try:
                connections['default'].ensure_connection()
            except OperationalError:
                self.stdout.write(
                    f"Banco de dados indisponível (tentativa {attempt}), aguardando {options['interval']}s..."
                )
                time.sleep(options['interval'])
            else:
                self.stdout.write(self.style.SUCCESS('Banco de dados disponível!'))
                return

        raise CommandError('Banco de dados não respondeu dentro do limite de tentativas.')
