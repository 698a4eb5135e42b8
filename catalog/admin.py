from django.contrib import admin
from .models import Taxon, Property, Product, ProductProperty, ProducerProperty, Variant, VariantOverride


class ProductPropertyInline(admin.TabularInline):
    model = ProductProperty
    extra = 0


class VariantInline(admin.TabularInline):
    model = Variant
    extra = 0
    fields = ['display_name', 'unit_description', 'sku', 'price', 'count_on_hand', 'on_demand']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'supplier', 'primary_taxon', 'created_at']
    list_filter = ['supplier', 'primary_taxon']
    search_fields = ['name', 'supplier__name']
    inlines = [ProductPropertyInline, VariantInline]


@admin.register(VariantOverride)
class VariantOverrideAdmin(admin.ModelAdmin):
    list_display = ['variant', 'hub', 'price', 'count_on_hand', 'on_demand', 'tag_list']
    list_filter = ['hub']
    search_fields = ['variant__product__name', 'hub__name', 'tag_list']


@admin.register(ProducerProperty)
class ProducerPropertyAdmin(admin.ModelAdmin):
    list_display = ['producer', 'property', 'value', 'position']
    list_filter = ['property']


admin.site.register(Taxon)
admin.site.register(Property)
