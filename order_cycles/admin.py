from django.contrib import admin
from .models import OrderCycle, Exchange


class ExchangeInline(admin.TabularInline):
    model = Exchange
    fk_name = 'order_cycle'
    extra = 0
    filter_horizontal = ['variants']


@admin.register(OrderCycle)
class OrderCycleAdmin(admin.ModelAdmin):
    list_display = ['name', 'coordinator', 'orders_open_at', 'orders_close_at']
    list_filter = ['coordinator']
    search_fields = ['name', 'coordinator__name']
    inlines = [ExchangeInline]
