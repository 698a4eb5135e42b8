from django.contrib import admin
from .models import Order, LineItem


class LineItemInline(admin.TabularInline):
    model = LineItem
    extra = 0


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['number', 'email', 'distributor', 'order_cycle', 'state', 'total', 'completed_at']
    list_filter = ['state', 'distributor']
    search_fields = ['number', 'email']
    readonly_fields = ['number', 'item_total', 'total', 'completed_at']
    inlines = [LineItemInline]
