# tag_rules/models.py
from django.db import models
from enterprises.models import Enterprise
from tag_rules.matching import parse_tags, format_tags
from utils.constants import VISIBILITY_CHOICES, VISIBILITY_VISIBLE, VISIBILITY_HIDDEN
import uuid


class TagRule(models.Model):
    """
    Shows or hides an enterprise's tagged variants, either for everyone
    (default rules) or for customers carrying particular tags.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    enterprise = models.ForeignKey(Enterprise, on_delete=models.CASCADE, related_name='tag_rules')
    is_default = models.BooleanField(default=False)
    priority = models.PositiveIntegerField(default=100, help_text="Lower numbers are consulted first")
    preferred_customer_tags = models.TextField(blank=True, default='')
    preferred_variant_tags = models.TextField(blank=True, default='')
    preferred_matched_variants_visibility = models.CharField(
        max_length=10, choices=VISIBILITY_CHOICES, default=VISIBILITY_VISIBLE
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['priority', 'created_at']
        indexes = [
            models.Index(fields=['enterprise', 'is_default']),
        ]

    def __str__(self):
        scope = 'default' if self.is_default else format_tags(self.preferred_customer_tags)
        return f"{self.enterprise.name}: {self.preferred_variant_tags} -> {self.preferred_matched_variants_visibility} ({scope})"

    def save(self, *args, **kwargs):
        self.preferred_customer_tags = format_tags(self.preferred_customer_tags)
        self.preferred_variant_tags = format_tags(self.preferred_variant_tags)
        super().save(*args, **kwargs)

    @property
    def customer_tags(self):
        return parse_tags(self.preferred_customer_tags)

    @property
    def variant_tags(self):
        return parse_tags(self.preferred_variant_tags)

    @property
    def hides_matched(self):
        return self.preferred_matched_variants_visibility == VISIBILITY_HIDDEN
