from django.contrib import admin
from .models import TagRule


@admin.register(TagRule)
class TagRuleAdmin(admin.ModelAdmin):
    list_display = [
        'enterprise', 'is_default', 'priority', 'preferred_customer_tags',
        'preferred_variant_tags', 'preferred_matched_variants_visibility'
    ]
    list_filter = ['is_default', 'preferred_matched_variants_visibility', 'enterprise']
    search_fields = ['enterprise__name', 'preferred_customer_tags', 'preferred_variant_tags']
