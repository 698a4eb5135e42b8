# enterprises/models.py
from django.db import models
from django.conf import settings
from django.utils.text import slugify
from utils.constants import SELLS_CHOICES, SELLS_NONE, SELLS_ANY, SELLS_OWN
from tag_rules.matching import parse_tags, format_tags
import uuid


class Enterprise(models.Model):
    """A producer, a hub (distributor), or both"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, unique=True)
    permalink = models.SlugField(max_length=255, unique=True, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='owned_enterprises'
    )
    is_primary_producer = models.BooleanField(default=False)
    sells = models.CharField(max_length=10, choices=SELLS_CHOICES, default=SELLS_NONE)
    email_address = models.EmailField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['permalink']),
            models.Index(fields=['sells']),
        ]

    def save(self, *args, **kwargs):
        if not self.permalink:  # auto-generate permalink
            base_slug = slugify(self.name) or 'enterprise'
            slug = base_slug
            counter = 1
            while Enterprise.objects.filter(permalink=slug).exists():
                slug = f"{base_slug}-{counter}"
                counter += 1
            self.permalink = slug
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name

    @property
    def is_distributor(self):
        return self.sells in [SELLS_OWN, SELLS_ANY]


class EnterpriseRole(models.Model):
    """Grants a user manager rights over an enterprise they do not own"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='enterprise_roles')
    enterprise = models.ForeignKey(Enterprise, on_delete=models.CASCADE, related_name='user_roles')
    receives_notifications = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ['user', 'enterprise']
        indexes = [
            models.Index(fields=['user']),
        ]

    def __str__(self):
        return f"{self.user.email} - {self.enterprise.name}"


class Customer(models.Model):
    """A shopper as known to one distributor, carrying that distributor's tags"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    enterprise = models.ForeignKey(Enterprise, on_delete=models.CASCADE, related_name='customers')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='customers'
    )
    email = models.EmailField()
    code = models.CharField(max_length=255, blank=True)
    tag_list = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ['enterprise', 'email']
        ordering = ['email']
        indexes = [
            models.Index(fields=['enterprise', 'user']),
        ]

    def __str__(self):
        return f"{self.email} ({self.enterprise.name})"

    @property
    def tags(self):
        return parse_tags(self.tag_list)

    def save(self, *args, **kwargs):
        self.tag_list = format_tags(self.tag_list)
        if not self.email and self.user_id:
            self.email = self.user.email
        super().save(*args, **kwargs)

    @classmethod
    def for_user_at(cls, user, enterprise):
        if user is None or not user.is_authenticated:
            return None
        return cls.objects.filter(enterprise=enterprise, user=user).first()
