# reports/access.py
from django.db.models import Q
from orders.models import Order, LineItem


class Permissions:
    """What orders and line items a user may report on"""

    def __init__(self, user):
        self.user = user

    @property
    def is_admin(self):
        return bool(self.user and self.user.is_authenticated and self.user.is_admin)

    def managed_enterprises(self):
        return self.user.managed_enterprises()

    def visible_orders(self):
        if self.is_admin:
            return Order.objects.all()
        managed = self.managed_enterprises()
        return Order.objects.filter(
            Q(distributor__in=managed) | Q(order_cycle__coordinator__in=managed)
        ).distinct()

    def visible_line_items(self):
        """Line items of visible orders, plus producers' own products on any order"""
        if self.is_admin:
            return LineItem.objects.all()
        managed = self.managed_enterprises()
        return LineItem.objects.filter(
            Q(order__in=self.visible_orders()) | Q(variant__product__supplier__in=managed)
        ).distinct()
