from decimal import Decimal
from django.contrib.auth import get_user_model
from django.test import TestCase
from authentication.models import Address
from catalog.models import Taxon, Product, Variant
from enterprises.models import Enterprise
from orders.models import Order, LineItem
from utils.constants import ORDER_STATE_CART, ORDER_STATE_COMPLETE, SELLS_ANY

User = get_user_model()


class OrderTests(TestCase):
    def setUp(self):
        owner = User.objects.create_user(email="owner@example.com")
        self.hub = Enterprise.objects.create(name="Hub", owner=owner, sells=SELLS_ANY)
        taxon = Taxon.objects.create(name="Bakery")
        product = Product.objects.create(name="Sourdough", supplier=self.hub, primary_taxon=taxon)
        self.variant = Variant.objects.create(product=product, price=Decimal("7.50"), count_on_hand=4)
        self.shopper = User.objects.create_user(email="shopper@example.com", first_name="Kim", last_name="Lee")

    def test_number_is_generated(self):
        order = Order.objects.create(distributor=self.hub)
        self.assertTrue(order.number.startswith("R"))
        self.assertEqual(len(order.number), 10)
        self.assertEqual(order.state, ORDER_STATE_CART)

    def test_complete_updates_totals(self):
        order = Order.objects.create(distributor=self.hub, user=self.shopper)
        LineItem.objects.create(order=order, variant=self.variant, quantity=2, price=Decimal("7.50"))
        order.complete()
        order.refresh_from_db()
        self.assertEqual(order.state, ORDER_STATE_COMPLETE)
        self.assertIsNotNone(order.completed_at)
        self.assertEqual(order.item_total, Decimal("15.00"))
        self.assertEqual(list(Order.objects.complete()), [order])
        self.assertTrue(self.shopper.has_completed_orders())

    def test_customer_name_prefers_bill_address(self):
        order = Order.objects.create(distributor=self.hub, user=self.shopper)
        self.assertEqual(order.customer_name, "Kim Lee")
        order.bill_address = Address.objects.create(firstname="Billing", lastname="Name")
        self.assertEqual(order.customer_name, "Billing Name")
