from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from storefront.catalog.models import Category, Color, Variant, Product, ProductVariant


CATEGORIES = [
    ('Women', 'women'),
    ('Men', 'men'),
    ('Sports Bras', 'sports-bras'),
    ('Bikini Bottoms', 'bikini-bottoms'),
    ('Accessories', 'accessories'),
]

COLORS = [
    ('Black', '#000000'),
    ('White', '#FFFFFF'),
    ('Navy', '#1F2A44'),
    ('Coral', '#FF7F50'),
]

VARIANTS = ['S', 'M', 'L']

# (código, categoria, descrição, preço base)
PRODUCTS = [
    ('SB-001', 'sports-bras', 'High support sports bra', Decimal('39.90')),
    ('BB-001', 'bikini-bottoms', 'Classic bikini bottom', Decimal('29.90')),
    ('AC-001', 'accessories', 'Canvas tote bag', Decimal('19.90')),
]


class Command(BaseCommand):
    help = 'Carrega categorias, cores, variações e produtos de demonstração (idempotente)'

    @transaction.atomic
    def handle(self, *args, **kwargs):
        self.stdout.write('Criando dados iniciais do catálogo...')

        for name, slug in CATEGORIES:
            _, created = Category.objects.get_or_create(slug=slug, defaults={'name': name})
            if created:
                self.stdout.write(self.style.SUCCESS(f'Criada categoria "{name}"'))

        colors = {}
        for name, hex_code in COLORS:
            colors[name], _ = Color.objects.get_or_create(name=name, defaults={'hex_code': hex_code})

        variants = {}
        for name in VARIANTS:
            variants[name], _ = Variant.objects.get_or_create(name=name)

        for code, category_slug, description, price in PRODUCTS:
            product, created = Product.objects.get_or_create(
                product_code=code,
                defaults={
                    'category': Category.objects.get(slug=category_slug),
                    'description': description,
                    'quantity': 0,
                },
            )
            if not created:
                continue

            total = 0
            for color_name in ('Black', 'White'):
                for size in VARIANTS:
                    ProductVariant.objects.create(
                        product=product,
                        color=colors[color_name],
                        variant=variants[size],
                        sku=f'{code}-{color_name[:3].upper()}-{size}',
                        price=price,
                        quantity=10,
                        attributes={'size': size, 'color': color_name},
                    )
                    total += 10
            product.quantity = total
            product.save(update_fields=['quantity'])
            self.stdout.write(self.style.SUCCESS(f'Criado produto "{code}" com variações'))

        self.stdout.write(self.style.SUCCESS('Catálogo carregado.'))
