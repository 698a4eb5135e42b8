# orders/models.py
from django.db import models
from django.conf import settings
from django.utils import timezone
from decimal import Decimal
from authentication.models import Address
from catalog.models import Variant
from enterprises.models import Enterprise, Customer
from order_cycles.models import OrderCycle
from utils.constants import ORDER_STATES, ORDER_STATE_CART, ORDER_STATE_COMPLETE, ZERO
import uuid


def generate_order_number():
    return f"R{uuid.uuid4().hex[:9].upper()}"


class OrderQuerySet(models.QuerySet):
    def complete(self):
        return self.filter(state=ORDER_STATE_COMPLETE, completed_at__isnull=False)


class Order(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    number = models.CharField(max_length=32, unique=True, default=generate_order_number)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders'
    )
    customer = models.ForeignKey(Customer, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    email = models.EmailField(blank=True)
    distributor = models.ForeignKey(Enterprise, on_delete=models.PROTECT, related_name='distributed_orders')
    order_cycle = models.ForeignKey(OrderCycle, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    bill_address = models.ForeignKey(Address, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    ship_address = models.ForeignKey(Address, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    state = models.CharField(max_length=20, choices=ORDER_STATES, default=ORDER_STATE_CART)
    item_total = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    total = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = OrderQuerySet.as_manager()

    class Meta:
        ordering = ['-completed_at', '-created_at']
        indexes = [
            models.Index(fields=['state', 'completed_at']),
            models.Index(fields=['distributor', 'order_cycle']),
        ]

    def __str__(self):
        return self.number

    def update_totals(self):
        self.item_total = sum((item.amount for item in self.line_items.all()), Decimal('0.00'))
        self.total = self.item_total
        self.save(update_fields=['item_total', 'total'])

    def complete(self):
        self.update_totals()
        self.state = ORDER_STATE_COMPLETE
        self.completed_at = timezone.now()
        self.save(update_fields=['state', 'completed_at'])

    @property
    def customer_name(self):
        if self.bill_address:
            return f"{self.bill_address.firstname} {self.bill_address.lastname}".strip()
        if self.user:
            return f"{self.user.first_name} {self.user.last_name}".strip()
        return ''


class LineItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='line_items')
    variant = models.ForeignKey(Variant, on_delete=models.PROTECT, related_name='line_items')
    quantity = models.PositiveIntegerField(default=1)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at']

    def __str__(self):
        return f"{self.quantity} x {self.variant}"

    @property
    def amount(self):
        return self.price * self.quantity
