# order_cycles/models.py
from django.db import models
from django.utils import timezone
from catalog.models import Variant
from enterprises.models import Enterprise
import uuid


class OrderCycle(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    coordinator = models.ForeignKey(Enterprise, on_delete=models.CASCADE, related_name='coordinated_order_cycles')
    orders_open_at = models.DateTimeField(null=True, blank=True)
    orders_close_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-orders_close_at', 'name']
        indexes = [
            models.Index(fields=['orders_open_at', 'orders_close_at']),
        ]

    def __str__(self):
        return self.name

    @property
    def is_open(self):
        now = timezone.now()
        return bool(
            self.orders_open_at and self.orders_close_at
            and self.orders_open_at <= now < self.orders_close_at
        )

    def outgoing_exchanges(self):
        return self.exchanges.filter(incoming=False)

    def incoming_exchanges(self):
        return self.exchanges.filter(incoming=True)

    def distributors(self):
        return Enterprise.objects.filter(
            received_exchanges__order_cycle=self,
            received_exchanges__incoming=False,
        ).distinct()

    def suppliers(self):
        return Enterprise.objects.filter(
            sent_exchanges__order_cycle=self,
            sent_exchanges__incoming=True,
        ).distinct()

    def has_distributor(self, distributor):
        return self.outgoing_exchanges().filter(receiver=distributor).exists()

    def variants_distributed_by(self, distributor):
        return Variant.objects.filter(
            exchanges__order_cycle=self,
            exchanges__incoming=False,
            exchanges__receiver=distributor,
        ).distinct()


class Exchange(models.Model):
    """
    Variants moving between two enterprises in an order cycle. Incoming
    exchanges run from a supplier to the coordinator, outgoing ones from
    the coordinator to a distributor.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_cycle = models.ForeignKey(OrderCycle, on_delete=models.CASCADE, related_name='exchanges')
    sender = models.ForeignKey(Enterprise, on_delete=models.CASCADE, related_name='sent_exchanges')
    receiver = models.ForeignKey(Enterprise, on_delete=models.CASCADE, related_name='received_exchanges')
    incoming = models.BooleanField(default=False)
    variants = models.ManyToManyField(Variant, blank=True, related_name='exchanges')
    pickup_time = models.CharField(max_length=255, blank=True)
    pickup_instructions = models.TextField(blank=True)

    class Meta:
        unique_together = ['order_cycle', 'sender', 'receiver', 'incoming']

    def __str__(self):
        direction = 'incoming' if self.incoming else 'outgoing'
        return f"{self.order_cycle.name}: {self.sender} -> {self.receiver} ({direction})"
