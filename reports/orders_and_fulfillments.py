# reports/orders_and_fulfillments.py
from decimal import Decimal
from utils.constants import (
    ORDER_STATE_COMPLETE,
    REPORT_SUPPLIER_TOTALS,
    REPORT_SUPPLIER_TOTALS_BY_DISTRIBUTOR,
    REPORT_DISTRIBUTOR_TOTALS_BY_SUPPLIER,
    REPORT_CUSTOMER_TOTALS,
)
from .grouper import OrderGrouper
import logging

logger = logging.getLogger(__name__)


def supplier_of(line_item):
    return line_item.variant.product.supplier


def product_of(line_item):
    return line_item.variant.product


def distributor_of(line_item):
    return line_item.order.distributor


def supplier_name(line_items):
    return supplier_of(line_items[0]).name


def product_name(line_items):
    return product_of(line_items[0]).name


def variant_name(line_items):
    return line_items[0].variant.full_name


def distributor_name(line_items):
    return distributor_of(line_items[0]).name


def total_quantity(line_items):
    return sum(item.quantity for item in line_items)


def cost_per_unit(line_items):
    return line_items[0].price


def total_cost(line_items):
    return sum((item.amount for item in line_items), Decimal('0.00'))


def stock_status(line_items):
    return 'On demand' if line_items[0].variant.on_demand else ''


def blank(line_items):
    return ''


def total_label(line_items):
    return 'TOTAL'


class SupplierTotalsReport:
    REPORT_TYPE = REPORT_SUPPLIER_TOTALS

    header = [
        'Producer', 'Product', 'Variant', 'Amount',
        'Curr. Cost per Unit', 'Total Cost', 'Status',
    ]

    @property
    def rules(self):
        return [
            {'group_by': supplier_of, 'sort_by': lambda supplier: supplier.name},
            {'group_by': product_of, 'sort_by': lambda product: product.name},
            {'group_by': lambda item: item.variant, 'sort_by': lambda variant: variant.full_name},
        ]

    @property
    def columns(self):
        return [
            supplier_name, product_name, variant_name, total_quantity,
            cost_per_unit, total_cost, stock_status,
        ]


class SupplierTotalsByDistributorReport:
    REPORT_TYPE = REPORT_SUPPLIER_TOTALS_BY_DISTRIBUTOR

    header = [
        'Producer', 'Product', 'Variant', 'To Hub', 'Amount',
        'Curr. Cost per Unit', 'Total Cost',
    ]

    @property
    def rules(self):
        return [
            {'group_by': supplier_of, 'sort_by': lambda supplier: supplier.name},
            {'group_by': product_of, 'sort_by': lambda product: product.name},
            {
                'group_by': lambda item: item.variant,
                'sort_by': lambda variant: variant.full_name,
                'summary_columns': [
                    blank, blank, blank, total_label, total_quantity, blank, total_cost,
                ],
            },
            {'group_by': distributor_of, 'sort_by': lambda distributor: distributor.name},
        ]

    @property
    def columns(self):
        return [
            supplier_name, product_name, variant_name, distributor_name,
            total_quantity, cost_per_unit, total_cost,
        ]


class DistributorTotalsBySupplierReport:
    REPORT_TYPE = REPORT_DISTRIBUTOR_TOTALS_BY_SUPPLIER

    header = [
        'Hub', 'Producer', 'Product', 'Variant', 'Amount',
        'Curr. Cost per Unit', 'Total Cost',
    ]

    @property
    def rules(self):
        return [
            {
                'group_by': distributor_of,
                'sort_by': lambda distributor: distributor.name,
                'summary_columns': [
                    distributor_name, total_label, blank, blank, blank, blank, total_cost,
                ],
            },
            {'group_by': supplier_of, 'sort_by': lambda supplier: supplier.name},
            {'group_by': product_of, 'sort_by': lambda product: product.name},
            {'group_by': lambda item: item.variant, 'sort_by': lambda variant: variant.full_name},
        ]

    @property
    def columns(self):
        return [
            distributor_name, supplier_name, product_name, variant_name,
            total_quantity, cost_per_unit, total_cost,
        ]


class CustomerTotalsReport:
    REPORT_TYPE = REPORT_CUSTOMER_TOTALS

    header = [
        'Hub', 'Customer', 'Email', 'Order', 'Completed At',
        'Amount', 'Item Total',
    ]

    @property
    def rules(self):
        return [
            {'group_by': distributor_of, 'sort_by': lambda distributor: distributor.name},
            {'group_by': lambda item: item.order},
        ]

    @property
    def columns(self):
        return [
            distributor_name,
            lambda items: items[0].order.customer_name,
            lambda items: items[0].order.email,
            lambda items: items[0].order.number,
            lambda items: items[0].order.completed_at,
            total_quantity,
            total_cost,
        ]


REPORT_CLASSES = {
    report_class.REPORT_TYPE: report_class
    for report_class in [
        SupplierTotalsReport,
        SupplierTotalsByDistributorReport,
        DistributorTotalsBySupplierReport,
        CustomerTotalsReport,
    ]
}


class OrdersAndFulfillmentsReport:
    """
    Line item totals for completed orders, in one of several groupings
    selected by ``options['report_type']``.

    ``render_table`` false builds the report's shape only: ``table_items``
    is then empty.
    """

    def __init__(self, permissions, options=None, render_table=False):
        self.permissions = permissions
        self.options = options or {}
        self.render_table = render_table

        report_type = self.options.get('report_type') or REPORT_SUPPLIER_TOTALS
        if report_type not in REPORT_CLASSES:
            raise ValueError(f"Unknown report type: {report_type}")
        self.report_type = report_type
        self.report = REPORT_CLASSES[report_type]()

    @property
    def header(self):
        return list(self.report.header)

    @property
    def rules(self):
        return self.report.rules

    @property
    def columns(self):
        return self.report.columns

    def table_items(self):
        if not self.render_table:
            return []

        line_items = self.permissions.visible_line_items().filter(
            order__state=ORDER_STATE_COMPLETE,
            order__completed_at__isnull=False,
        )

        if self.options.get('start_date'):
            line_items = line_items.filter(order__completed_at__date__gte=self.options['start_date'])
        if self.options.get('end_date'):
            line_items = line_items.filter(order__completed_at__date__lte=self.options['end_date'])
        if self.options.get('distributor_id'):
            line_items = line_items.filter(order__distributor_id=self.options['distributor_id'])
        if self.options.get('supplier_id'):
            line_items = line_items.filter(variant__product__supplier_id=self.options['supplier_id'])
        if self.options.get('order_cycle_id'):
            line_items = line_items.filter(order__order_cycle_id=self.options['order_cycle_id'])

        return list(
            line_items.select_related(
                'order__distributor', 'order__bill_address', 'order__user',
                'variant__product__supplier',
            ).order_by('order__completed_at', 'created_at')
        )

    def table(self):
        rows = OrderGrouper(self.rules, self.columns).table(self.table_items())
        logger.info(f"Built {self.report_type} report with {len(rows)} rows")
        return rows
