# reports/tests.py
import os
import shutil
import tempfile
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase, SimpleTestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APITestCase, APIClient
from rest_framework import status

from authentication.models import Address, Role
from catalog.models import Taxon, Product, Variant
from enterprises.models import Enterprise, EnterpriseRole
from order_cycles.models import OrderCycle
from orders.models import Order, LineItem
from utils.constants import (
    ROLE_ADMIN, SELLS_ANY, REPORT_SUPPLIER_TOTALS, REPORT_SUPPLIER_TOTALS_BY_DISTRIBUTOR,
    REPORT_DISTRIBUTOR_TOTALS_BY_SUPPLIER, REPORT_CUSTOMER_TOTALS,
)
from .access import Permissions
from .grouper import OrderGrouper
from .models import ReportExport
from .orders_and_fulfillments import OrdersAndFulfillmentsReport
from .tasks import generate_report_export, delete_expired_reports
from .utils import export_to_csv, export_to_excel, export_to_pdf, format_cell

User = get_user_model()


class OrderGrouperTest(SimpleTestCase):
    """Test grouping plain dict rows"""

    items = [
        {'supplier': 'B', 'product': 'x', 'qty': 1},
        {'supplier': 'A', 'product': 'y', 'qty': 2},
        {'supplier': 'A', 'product': 'x', 'qty': 3},
        {'supplier': 'B', 'product': 'x', 'qty': 4},
    ]

    columns = [
        lambda items: items[0]['supplier'],
        lambda items: items[0]['product'],
        lambda items: sum(item['qty'] for item in items),
    ]

    def test_empty_items_give_no_rows(self):
        grouper = OrderGrouper([{'group_by': lambda item: item['supplier']}], self.columns)
        self.assertEqual(grouper.table([]), [])

    def test_groups_keep_first_seen_order_without_sort(self):
        rules = [
            {'group_by': lambda item: item['supplier']},
            {'group_by': lambda item: item['product']},
        ]
        rows = OrderGrouper(rules, self.columns).table(self.items)
        self.assertEqual(rows, [['B', 'x', 5], ['A', 'y', 2], ['A', 'x', 3]])

    def test_sort_by_orders_groups(self):
        rules = [
            {'group_by': lambda item: item['supplier'], 'sort_by': lambda supplier: supplier},
            {'group_by': lambda item: item['product'], 'sort_by': lambda product: product},
        ]
        rows = OrderGrouper(rules, self.columns).table(self.items)
        self.assertEqual(rows, [['A', 'x', 3], ['A', 'y', 2], ['B', 'x', 5]])

    def test_summary_columns_follow_each_group(self):
        rules = [
            {
                'group_by': lambda item: item['supplier'],
                'sort_by': lambda supplier: supplier,
                'summary_columns': [
                    lambda items: items[0]['supplier'],
                    lambda items: 'TOTAL',
                    lambda items: sum(item['qty'] for item in items),
                ],
            },
            {'group_by': lambda item: item['product'], 'sort_by': lambda product: product},
        ]
        rows = OrderGrouper(rules, self.columns).table(self.items)
        self.assertEqual(rows, [
            ['A', 'x', 3], ['A', 'y', 2], ['A', 'TOTAL', 5],
            ['B', 'x', 5], ['B', 'TOTAL', 5],
        ])

    def test_no_rules_gives_single_row(self):
        rows = OrderGrouper([], self.columns).table(self.items)
        self.assertEqual(rows, [['B', 'x', 10]])


class ReportFixtureMixin:
    def build_orders(self):
        self.owner = User.objects.create_user(email="owner@example.com")
        self.supplier = Enterprise.objects.create(name="Sunny Orchard", owner=self.owner, is_primary_producer=True)
        self.distributor = Enterprise.objects.create(name="Market Hub", owner=self.owner, sells=SELLS_ANY)
        self.order_cycle = OrderCycle.objects.create(name="Weekly", coordinator=self.distributor)
        taxon = Taxon.objects.create(name="Fruit")
        self.product = Product.objects.create(name="Plums", supplier=self.supplier, primary_taxon=taxon)
        self.variant = Variant.objects.create(
            product=self.product, unit_description="1kg", price=Decimal("3.00"), count_on_hand=50
        )

        self.shopper = User.objects.create_user(email="shopper@example.com")
        address = Address.objects.create(firstname="Sam", lastname="Shopper")
        self.order = Order.objects.create(
            user=self.shopper, email=self.shopper.email, distributor=self.distributor,
            order_cycle=self.order_cycle, bill_address=address,
        )
        self.line_item = LineItem.objects.create(
            order=self.order, variant=self.variant, quantity=2, price=Decimal("3.00")
        )
        self.order.complete()

    def admin_user(self):
        admin = User.objects.create_user(email="admin@example.com")
        admin.spree_roles.add(Role.objects.get_or_create(name=ROLE_ADMIN)[0])
        return admin


class SupplierTotalsReportTest(ReportFixtureMixin, TestCase):
    def setUp(self):
        self.build_orders()
        self.permissions = Permissions(self.admin_user())

    def build_report(self, **options):
        return OrdersAndFulfillmentsReport(self.permissions, options, render_table=True)

    def test_one_line_item_gives_one_row_led_by_supplier_name(self):
        rows = self.build_report(report_type=REPORT_SUPPLIER_TOTALS).table()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0][0], "Sunny Orchard")
        self.assertEqual(rows[0][1:6], ["Plums", "Plums - 1kg", 2, Decimal("3.00"), Decimal("6.00")])

    def test_default_report_type_is_supplier_totals(self):
        report = OrdersAndFulfillmentsReport(self.permissions)
        self.assertEqual(report.report_type, REPORT_SUPPLIER_TOTALS)
        self.assertEqual(report.header[0], "Producer")

    def test_without_render_table_there_are_no_items(self):
        report = OrdersAndFulfillmentsReport(self.permissions, {}, render_table=False)
        self.assertEqual(report.table_items(), [])
        self.assertEqual(report.table(), [])

    def test_unknown_report_type(self):
        with self.assertRaises(ValueError):
            OrdersAndFulfillmentsReport(self.permissions, {'report_type': 'nonsense'})

    def test_incomplete_orders_are_left_out(self):
        cart = Order.objects.create(distributor=self.distributor, order_cycle=self.order_cycle)
        LineItem.objects.create(order=cart, variant=self.variant, quantity=5, price=Decimal("3.00"))
        rows = self.build_report().table()
        self.assertEqual(rows[0][3], 2)

    def test_line_items_of_same_variant_are_summed(self):
        second = Order.objects.create(distributor=self.distributor, order_cycle=self.order_cycle)
        LineItem.objects.create(order=second, variant=self.variant, quantity=3, price=Decimal("3.00"))
        second.complete()
        rows = self.build_report().table()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0][3], 5)
        self.assertEqual(rows[0][5], Decimal("15.00"))

    def test_variants_sharing_a_name_get_their_own_rows(self):
        twin = Variant.objects.create(
            product=self.product, unit_description="1kg", price=Decimal("3.50"), count_on_hand=5
        )
        LineItem.objects.create(order=self.order, variant=twin, quantity=1, price=Decimal("3.50"))
        rows = self.build_report().table()
        self.assertEqual(len(rows), 2)
        self.assertEqual(sorted(row[3] for row in rows), [1, 2])

    def test_filters(self):
        today = timezone.localdate()
        self.assertEqual(len(self.build_report(start_date=str(today)).table()), 1)
        self.assertEqual(len(self.build_report(end_date=str(today - timedelta(days=1))).table()), 0)
        self.assertEqual(len(self.build_report(distributor_id=str(self.distributor.id)).table()), 1)
        self.assertEqual(len(self.build_report(supplier_id=str(self.distributor.id)).table()), 0)
        self.assertEqual(len(self.build_report(order_cycle_id=str(self.order_cycle.id)).table()), 1)

    def test_supplier_totals_by_distributor_adds_summary_row(self):
        rows = self.build_report(report_type=REPORT_SUPPLIER_TOTALS_BY_DISTRIBUTOR).table()
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0][3], "Market Hub")
        self.assertEqual(rows[1][3], "TOTAL")
        self.assertEqual(rows[1][6], Decimal("6.00"))

    def test_distributor_totals_by_supplier(self):
        rows = self.build_report(report_type=REPORT_DISTRIBUTOR_TOTALS_BY_SUPPLIER).table()
        self.assertEqual(rows[0][:2], ["Market Hub", "Sunny Orchard"])
        self.assertEqual(rows[-1][:2], ["Market Hub", "TOTAL"])

    def test_customer_totals(self):
        rows = self.build_report(report_type=REPORT_CUSTOMER_TOTALS).table()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0][:4], ["Market Hub", "Sam Shopper", "shopper@example.com", self.order.number])


class PermissionsTest(ReportFixtureMixin, TestCase):
    def setUp(self):
        self.build_orders()

    def test_distributor_manager_sees_its_orders(self):
        manager = User.objects.create_user(email="manager@example.com")
        EnterpriseRole.objects.create(user=manager, enterprise=self.distributor)
        permissions = Permissions(manager)
        self.assertEqual(list(permissions.visible_orders()), [self.order])
        self.assertEqual(list(permissions.visible_line_items()), [self.line_item])

    def test_producer_sees_line_items_of_own_products(self):
        producer_owner = User.objects.create_user(email="producer@example.com")
        self.supplier.owner = producer_owner
        self.supplier.save()
        permissions = Permissions(producer_owner)
        self.assertEqual(list(permissions.visible_orders()), [])
        self.assertEqual(list(permissions.visible_line_items()), [self.line_item])

    def test_unrelated_user_sees_nothing(self):
        permissions = Permissions(User.objects.create_user(email="nobody@example.com"))
        self.assertEqual(list(permissions.visible_line_items()), [])


class ReportExportModelTest(TestCase):
    """Test ReportExport model"""

    def setUp(self):
        self.user = User.objects.create_user(email="finance@example.com")

    def test_create_report_export(self):
        report = ReportExport.objects.create(report_type=REPORT_SUPPLIER_TOTALS, generated_by=self.user)
        self.assertEqual(report.status, 'pending')
        self.assertIsNotNone(report.expires_at)
        self.assertFalse(report.is_expired())

    def test_mark_completed(self):
        report = ReportExport.objects.create(report_type=REPORT_SUPPLIER_TOTALS, format='excel', generated_by=self.user)
        report.mark_completed('/path/to/file.xlsx', 100)
        self.assertEqual(report.status, 'completed')
        self.assertEqual(report.record_count, 100)
        self.assertIsNotNone(report.completed_at)

    def test_mark_failed(self):
        report = ReportExport.objects.create(report_type=REPORT_SUPPLIER_TOTALS, generated_by=self.user)
        report.mark_failed('Error generating report')
        self.assertEqual(report.status, 'failed')
        self.assertEqual(report.error_message, 'Error generating report')

    def test_expiry(self):
        report = ReportExport.objects.create(report_type=REPORT_SUPPLIER_TOTALS, generated_by=self.user)
        report.expires_at = timezone.now() - timedelta(days=1)
        report.save()
        self.assertTrue(report.is_expired())
        self.assertEqual(delete_expired_reports(), 1)
        self.assertFalse(ReportExport.objects.exists())


class ExportUtilsTest(SimpleTestCase):
    header = ['Producer', 'Amount', 'Total Cost']
    rows = [['Sunny Orchard', 2, Decimal('6')]]

    def test_format_cell(self):
        self.assertEqual(format_cell(Decimal('6')), '6.00')
        self.assertEqual(format_cell(None), '')
        self.assertEqual(format_cell(3), 3)

    def test_export_to_csv(self):
        content = export_to_csv(self.header, self.rows)
        self.assertEqual(content.splitlines(), ['Producer,Amount,Total Cost', 'Sunny Orchard,2,6.00'])

    def test_export_to_excel(self):
        content = export_to_excel(self.header, self.rows, 'Supplier Totals')
        self.assertTrue(content.startswith(b'PK'))

    def test_export_to_pdf(self):
        content = export_to_pdf(self.header, self.rows, 'Supplier Totals')
        self.assertTrue(content.startswith(b'%PDF'))


class ReportExportTaskTest(ReportFixtureMixin, TestCase):
    def setUp(self):
        self.build_orders()
        self.media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)

    def test_generates_csv_file(self):
        export = ReportExport.objects.create(
            report_type=REPORT_SUPPLIER_TOTALS, format='csv', generated_by=self.admin_user(),
            filters={'distributor_id': str(self.distributor.id)},
        )
        with override_settings(MEDIA_ROOT=self.media_root):
            generate_report_export(str(export.id))

        export.refresh_from_db()
        self.assertEqual(export.status, 'completed')
        self.assertEqual(export.record_count, 1)
        self.assertTrue(os.path.exists(export.file_path))
        with open(export.file_path) as f:
            lines = f.read().splitlines()
        self.assertEqual(lines[0].split(',')[0], 'Producer')
        self.assertTrue(lines[1].startswith('Sunny Orchard,Plums'))

    def test_missing_owner_marks_export_failed(self):
        export = ReportExport.objects.create(report_type=REPORT_SUPPLIER_TOTALS, format='csv')
        with override_settings(MEDIA_ROOT=self.media_root):
            generate_report_export(str(export.id))
        export.refresh_from_db()
        self.assertEqual(export.status, 'failed')


class OrdersAndFulfillmentsViewTest(ReportFixtureMixin, APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.build_orders()
        self.url = reverse('reports:orders-and-fulfillments')

    def test_requires_enterprise_manager(self):
        self.client.force_authenticate(user=self.shopper)
        response = self.client.post(self.url, {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_owner_gets_table(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.post(self.url, {'report_type': REPORT_SUPPLIER_TOTALS}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['header'][0], 'Producer')
        self.assertEqual(len(response.data['rows']), 1)
        self.assertEqual(response.data['rows'][0][0], 'Sunny Orchard')
        self.assertEqual(response.data['rows'][0][5], '6.00')

    def test_invalid_date_range(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.post(
            self.url, {'start_date': '2024-02-01', 'end_date': '2024-01-01'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_report_type(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.post(self.url, {'report_type': 'nonsense'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @patch('reports.views.generate_report_export.delay')
    def test_export_is_queued(self, mock_delay):
        self.client.force_authenticate(user=self.owner)
        response = self.client.post(
            self.url, {'report_type': REPORT_CUSTOMER_TOTALS, 'format': 'pdf'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_202_ACCEPTED)
        export = ReportExport.objects.get()
        self.assertEqual(export.report_type, REPORT_CUSTOMER_TOTALS)
        self.assertEqual(export.generated_by, self.owner)
        self.assertNotIn('report_type', export.filters)
        mock_delay.assert_called_once_with(str(export.id))


class ReportExportViewSetTest(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(email="owner@example.com")
        Enterprise.objects.create(name="Hub", owner=self.owner, sells=SELLS_ANY)
        self.other = User.objects.create_user(email="other@example.com")
        Enterprise.objects.create(name="Other Hub", owner=self.other, sells=SELLS_ANY)
        self.export = ReportExport.objects.create(report_type=REPORT_SUPPLIER_TOTALS, generated_by=self.owner)
        ReportExport.objects.create(report_type=REPORT_SUPPLIER_TOTALS, generated_by=self.other)

    def test_lists_own_exports(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.get(reverse('reports:export-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data], [str(self.export.id)])

    def test_download_pending_export(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.get(reverse('reports:export-download', args=[self.export.id]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_download_expired_export(self):
        self.export.expires_at = timezone.now() - timedelta(days=1)
        self.export.save()
        self.client.force_authenticate(user=self.owner)
        response = self.client.get(reverse('reports:export-download', args=[self.export.id]))
        self.assertEqual(response.status_code, status.HTTP_410_GONE)

    def test_download_completed_export(self):
        media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, media_root, ignore_errors=True)
        file_path = os.path.join(media_root, 'report.csv')
        with open(file_path, 'w') as f:
            f.write('Producer\n')
        self.export.mark_completed(file_path, 0)

        self.client.force_authenticate(user=self.owner)
        response = self.client.get(reverse('reports:export-download', args=[self.export.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'text/csv')
        self.assertIn(self.export.download_filename, response['Content-Disposition'])
        self.assertEqual(b''.join(response.streaming_content), b'Producer\n')

    def test_cleanup_requires_admin(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.post(reverse('reports:export-cleanup-expired'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_purges_expired_exports(self):
        admin = User.objects.create_user(email="admin@example.com")
        admin.spree_roles.add(Role.objects.create(name=ROLE_ADMIN))
        self.export.expires_at = timezone.now() - timedelta(days=1)
        self.export.save()

        self.client.force_authenticate(user=admin)
        response = self.client.post(reverse('reports:export-cleanup-expired'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'deleted': 1})
        self.assertFalse(ReportExport.objects.filter(id=self.export.id).exists())
