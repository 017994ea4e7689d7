import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.text import slugify

from storefront.core.entities import CategoryStatus, PriceRuleType

CATEGORY_STATUS_CHOICES = [(status.value, status.value) for status in CategoryStatus]
PRICE_RULE_TYPE_CHOICES = [(rule_type.value, rule_type.value) for rule_type in PriceRuleType]


class TimestampedModel(models.Model):
    """Chave UUID e carimbos de criação/atualização comuns a todo o catálogo."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


# ====================================================================
# 1. Categoria
# ====================================================================

class Category(TimestampedModel):
    """Modelo para agrupar produtos. O slug é único no banco."""
    name = models.CharField(max_length=255, verbose_name="Nome da Categoria")
    slug = models.SlugField(max_length=255, unique=True)
    status = models.CharField(max_length=20, choices=CATEGORY_STATUS_CHOICES, default=CategoryStatus.ACTIVE.value)
    description = models.TextField(blank=True, null=True, verbose_name="Descrição")

    class Meta:
        verbose_name = "Categoria"
        verbose_name_plural = "Categorias"
        db_table = 'categories'
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


# ====================================================================
# 2. Cores e Variações
# ====================================================================

class Color(TimestampedModel):
    name = models.CharField(max_length=100, unique=True)
    hex_code = models.CharField(max_length=7, blank=True, null=True)
    image_url = models.URLField(max_length=500, blank=True, null=True)

    class Meta:
        verbose_name = "Cor"
        verbose_name_plural = "Cores"
        db_table = 'colors'
        ordering = ['name']

    def __str__(self):
        return self.name


class Variant(TimestampedModel):
    """Variação genérica (ex.: P, M, G) reutilizada por vários produtos."""
    name = models.CharField(max_length=100, unique=True)

    class Meta:
        verbose_name = "Variação"
        verbose_name_plural = "Variações"
        db_table = 'variants'
        ordering = ['name']

    def __str__(self):
        return self.name


# ====================================================================
# 3. Produto e suas variações vendáveis
# ====================================================================

class Product(TimestampedModel):
    product_code = models.CharField(max_length=100, unique=True, verbose_name="Código do Produto")
    product_sku = models.CharField(max_length=100, blank=True, null=True)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='products')
    quantity = models.PositiveIntegerField(default=0)
    description = models.TextField(blank=True, null=True)
    tags = models.JSONField(default=list, blank=True)
    images = models.JSONField(default=list, blank=True)
    is_featured = models.BooleanField(default=False, verbose_name="Em Destaque")

    class Meta:
        verbose_name = "Produto"
        verbose_name_plural = "Produtos"
        db_table = 'products'
        ordering = ['-created_at']

    def __str__(self):
        return self.product_code


class ProductVariant(TimestampedModel):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='variants')
    color = models.ForeignKey(Color, on_delete=models.SET_NULL, null=True, blank=True, related_name='product_variants')
    variant = models.ForeignKey(Variant, on_delete=models.SET_NULL, null=True, blank=True, related_name='product_variants')
    sku = models.CharField(max_length=100, unique=True)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    sale_price = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    quantity = models.PositiveIntegerField(default=0)
    image_url = models.URLField(max_length=500, blank=True, null=True)
    is_available = models.BooleanField(default=True)
    attributes = models.JSONField(default=dict, blank=True)

    class Meta:
        verbose_name = "Variação de Produto"
        verbose_name_plural = "Variações de Produto"
        db_table = 'product_variants'
        constraints = [
            models.UniqueConstraint(fields=['product', 'color', 'variant'], name='uq_product_color_variant'),
        ]

    def __str__(self):
        return self.sku


class ProductPriceRule(TimestampedModel):
    """Regra de preço para um produto OU uma variação (nunca ambos)."""
    product_id = models.UUIDField(blank=True, null=True, db_index=True)
    variant_id = models.UUIDField(blank=True, null=True, db_index=True)
    type = models.CharField(max_length=10, choices=PRICE_RULE_TYPE_CHOICES, default=PriceRuleType.PERCENT.value)
    value = models.DecimalField(max_digits=12, decimal_places=2)
    start_at = models.DateTimeField(blank=True, null=True)
    end_at = models.DateTimeField(blank=True, null=True)
    priority = models.IntegerField(default=0)

    class Meta:
        verbose_name = "Regra de Preço"
        verbose_name_plural = "Regras de Preço"
        db_table = 'product_price_rules'
        ordering = ['-priority', '-created_at']

    def __str__(self):
        target = f"product {self.product_id}" if self.product_id else f"variant {self.variant_id}"
        return f"{self.type} {self.value} ({target})"

    def clean(self):
        if bool(self.product_id) == bool(self.variant_id):
            raise ValidationError("Informe exatamente um entre product_id e variant_id.")
        if self.start_at and self.end_at and self.end_at <= self.start_at:
            raise ValidationError("end_at deve ser posterior a start_at.")
