# catalog/models.py
from django.db import models
from decimal import Decimal
from enterprises.models import Enterprise
from tag_rules.matching import parse_tags, format_tags
import uuid


class Taxon(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    parent = models.ForeignKey('self', on_delete=models.CASCADE, null=True, blank=True, related_name='children')
    pretty_name = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Property(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    presentation = models.CharField(max_length=255)

    class Meta:
        ordering = ['presentation']
        verbose_name_plural = 'properties'

    def __str__(self):
        return self.presentation


class Product(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    supplier = models.ForeignKey(Enterprise, on_delete=models.CASCADE, related_name='supplied_products')
    primary_taxon = models.ForeignKey(Taxon, on_delete=models.PROTECT, related_name='primary_products')
    properties = models.ManyToManyField(Property, through='ProductProperty', related_name='products', blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['supplier']),
            models.Index(fields=['primary_taxon']),
        ]

    def __str__(self):
        return self.name


class ProductProperty(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='product_properties')
    property = models.ForeignKey(Property, on_delete=models.CASCADE)
    value = models.CharField(max_length=255, blank=True)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        unique_together = ['product', 'property']
        ordering = ['position']


class ProducerProperty(models.Model):
    """A property held by a producer, applying to everything they supply"""
    producer = models.ForeignKey(Enterprise, on_delete=models.CASCADE, related_name='producer_properties')
    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name='producer_properties')
    value = models.CharField(max_length=255, blank=True)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        unique_together = ['producer', 'property']
        ordering = ['position']


class Variant(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='variants')
    sku = models.CharField(max_length=255, blank=True)
    display_name = models.CharField(max_length=255, blank=True)
    unit_description = models.CharField(max_length=255, blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    count_on_hand = models.IntegerField(default=0)
    on_demand = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at']

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        parts = [part for part in [self.display_name, self.unit_description] if part]
        if not parts:
            return self.product.name
        return f"{self.product.name} - {' '.join(parts)}"


class VariantOverride(models.Model):
    """Hub-specific price, stock and tags for a variant"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    hub = models.ForeignKey(Enterprise, on_delete=models.CASCADE, related_name='variant_overrides')
    variant = models.ForeignKey(Variant, on_delete=models.CASCADE, related_name='overrides')
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    count_on_hand = models.IntegerField(null=True, blank=True)
    on_demand = models.BooleanField(null=True, blank=True)
    tag_list = models.TextField(blank=True, default='')

    class Meta:
        unique_together = ['hub', 'variant']
        indexes = [
            models.Index(fields=['hub']),
        ]

    def __str__(self):
        return f"{self.variant} @ {self.hub}"

    def save(self, *args, **kwargs):
        self.tag_list = format_tags(self.tag_list)
        super().save(*args, **kwargs)

    @property
    def tags(self):
        return parse_tags(self.tag_list)

    @classmethod
    def indexed_for_hub(cls, hub, variants):
        return {
            override.variant_id: override
            for override in cls.objects.filter(hub=hub, variant__in=variants)
        }
