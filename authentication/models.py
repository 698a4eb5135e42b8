from django.db import models
from django.contrib.auth.models import AbstractUser
from django.utils.translation import gettext_lazy as _
from authentication.exceptions import DestroyWithOrdersError
from authentication.managers import CustomUserManager
from utils.constants import ROLE_ADMIN, API_KEY_BYTES, ORDER_STATE_COMPLETE
import secrets
import uuid


class Country(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    iso = models.CharField(max_length=2, blank=True)

    class Meta:
        ordering = ['name']
        verbose_name_plural = 'countries'

    def __str__(self):
        return self.name


class State(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    abbr = models.CharField(max_length=10, blank=True)
    country = models.ForeignKey(Country, on_delete=models.CASCADE, related_name='states')

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Address(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    firstname = models.CharField(max_length=255, blank=True)
    lastname = models.CharField(max_length=255, blank=True)
    address1 = models.CharField(max_length=255, blank=True)
    address2 = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=255, blank=True)
    zipcode = models.CharField(max_length=20, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    state_name = models.CharField(max_length=255, blank=True)
    state = models.ForeignKey(State, on_delete=models.SET_NULL, null=True, blank=True)
    country = models.ForeignKey(Country, on_delete=models.SET_NULL, null=True, blank=True)

    class Meta:
        verbose_name_plural = 'addresses'
        indexes = [
            models.Index(fields=['firstname']),
            models.Index(fields=['lastname']),
        ]

    def __str__(self):
        return f"{self.firstname} {self.lastname}, {self.address1}, {self.city}"


class Role(models.Model):
    name = models.CharField(max_length=50, unique=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class User(AbstractUser):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = None
    email = models.EmailField(unique=True)

    bill_address = models.ForeignKey(
        Address, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    ship_address = models.ForeignKey(
        Address, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    spree_roles = models.ManyToManyField(Role, blank=True, related_name='users')
    spree_api_key = models.CharField(max_length=48, null=True, blank=True, unique=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = CustomUserManager()

    class Meta:
        ordering = ['email']
        indexes = [
            models.Index(fields=['email']),
        ]

    def __str__(self):
        return self.email

    @property
    def is_admin(self):
        return self.is_superuser or self.spree_roles.filter(name=ROLE_ADMIN).exists()

    def managed_enterprises(self):
        """Enterprises this user owns or has a manager role on"""
        from enterprises.models import Enterprise  # lazy import to avoid circular import
        if self.is_admin:
            return Enterprise.objects.all()
        return Enterprise.objects.filter(
            models.Q(owner=self) | models.Q(user_roles__user=self)
        ).distinct()

    def manages(self, enterprise):
        return self.managed_enterprises().filter(pk=enterprise.pk).exists()

    def generate_spree_api_key(self):
        self.spree_api_key = secrets.token_hex(API_KEY_BYTES)
        self.save(update_fields=['spree_api_key'])
        return True

    def clear_spree_api_key(self):
        self.spree_api_key = None
        self.save(update_fields=['spree_api_key'])
        return True

    def has_completed_orders(self):
        return self.orders.filter(state=ORDER_STATE_COMPLETE).exists()

    def delete(self, *args, **kwargs):
        if self.has_completed_orders():
            raise DestroyWithOrdersError(_("Users with completed orders may not be deleted"))
        return super().delete(*args, **kwargs)
