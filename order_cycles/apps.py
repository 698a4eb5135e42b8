from django.apps import AppConfig


class OrderCyclesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'order_cycles'
    verbose_name = 'Order Cycles'
