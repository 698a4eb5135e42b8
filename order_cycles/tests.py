from datetime import timedelta
from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APITestCase, APIClient
from rest_framework import status
from catalog.models import (
    Taxon, Property, Product, ProductProperty, ProducerProperty, Variant, VariantOverride
)
from enterprises.models import Enterprise, Customer
from catalog.criteria import AllOf, NameContains
from order_cycles.catalog import DistributedCatalog
from order_cycles.models import OrderCycle, Exchange
from tag_rules.models import TagRule
from utils.constants import SELLS_ANY, VISIBILITY_HIDDEN, VISIBILITY_VISIBLE

User = get_user_model()


class OrderCycleFixtureMixin:
    """A coordinator, one producer and one hub selling four products"""

    def build_order_cycle(self):
        self.owner = User.objects.create_user(email="owner@example.com", password="secret123")
        self.coordinator = Enterprise.objects.create(name="Coordinator", owner=self.owner, sells=SELLS_ANY)
        self.supplier = Enterprise.objects.create(name="Green Acres", owner=self.owner, is_primary_producer=True)
        self.distributor = Enterprise.objects.create(name="Corner Hub", owner=self.owner, sells=SELLS_ANY)
        self.other_distributor = Enterprise.objects.create(name="Far Hub", owner=self.owner, sells=SELLS_ANY)

        self.fruit = Taxon.objects.create(name="Fruit")
        self.vegetables = Taxon.objects.create(name="Vegetables")
        self.dairy = Taxon.objects.create(name="Dairy")

        self.organic = Property.objects.create(name="organic", presentation="Organic")
        self.local = Property.objects.create(name="local", presentation="Local")
        self.fair_trade = Property.objects.create(name="fair_trade", presentation="Fair Trade")

        self.apples = self.create_product("Apples", self.fruit)
        self.bananas = self.create_product("Bananas", self.fruit)
        self.carrots = self.create_product("Carrots", self.vegetables)
        self.cheese = self.create_product("Cheese", self.dairy)

        ProductProperty.objects.create(product=self.apples, property=self.organic, value="certified")
        ProductProperty.objects.create(product=self.carrots, property=self.local, value="10km")

        self.apple_variant = self.apples.variants.get()
        self.banana_variant = self.bananas.variants.get()
        self.carrot_variant = self.carrots.variants.get()
        self.cheese_variant = self.cheese.variants.get()
        variants = [self.apple_variant, self.banana_variant, self.carrot_variant, self.cheese_variant]

        now = timezone.now()
        self.order_cycle = OrderCycle.objects.create(
            name="Weekly",
            coordinator=self.coordinator,
            orders_open_at=now - timedelta(days=1),
            orders_close_at=now + timedelta(days=6),
        )
        incoming = Exchange.objects.create(
            order_cycle=self.order_cycle, sender=self.supplier, receiver=self.coordinator, incoming=True
        )
        incoming.variants.set(variants)
        outgoing = Exchange.objects.create(
            order_cycle=self.order_cycle, sender=self.coordinator, receiver=self.distributor, incoming=False
        )
        outgoing.variants.set(variants)

        VariantOverride.objects.create(hub=self.distributor, variant=self.apple_variant, price="1234.56")
        VariantOverride.objects.create(hub=self.distributor, variant=self.cheese_variant, count_on_hand=0)

    def create_product(self, name, taxon):
        product = Product.objects.create(name=name, supplier=self.supplier, primary_taxon=taxon)
        Variant.objects.create(product=product, unit_description="1kg", price="2.50", count_on_hand=10)
        return product


class OrderCycleModelTests(OrderCycleFixtureMixin, TestCase):
    def setUp(self):
        self.build_order_cycle()

    def test_is_open(self):
        self.assertTrue(self.order_cycle.is_open)

    def test_distributors_and_suppliers(self):
        self.assertEqual(list(self.order_cycle.distributors()), [self.distributor])
        self.assertEqual(list(self.order_cycle.suppliers()), [self.supplier])
        self.assertTrue(self.order_cycle.has_distributor(self.distributor))
        self.assertFalse(self.order_cycle.has_distributor(self.other_distributor))

    def test_variants_distributed_by(self):
        self.assertEqual(self.order_cycle.variants_distributed_by(self.distributor).count(), 4)
        self.assertEqual(self.order_cycle.variants_distributed_by(self.other_distributor).count(), 0)


class DistributedCatalogTests(OrderCycleFixtureMixin, TestCase):
    def setUp(self):
        self.build_order_cycle()

    def product_names(self, catalog):
        return [product.name for product in catalog.products()]

    def test_zero_stock_override_excludes_variant(self):
        catalog = DistributedCatalog(self.order_cycle, self.distributor)
        self.assertEqual(self.product_names(catalog), ["Apples", "Bananas", "Carrots"])

    def test_on_demand_override_keeps_variant_without_stock(self):
        VariantOverride.objects.filter(variant=self.cheese_variant).update(on_demand=True)
        catalog = DistributedCatalog(self.order_cycle, self.distributor)
        self.assertIn("Cheese", self.product_names(catalog))

    def test_zero_stock_override_excludes_on_demand_variant(self):
        Variant.objects.filter(pk=self.cheese_variant.pk).update(on_demand=True)
        catalog = DistributedCatalog(self.order_cycle, self.distributor)
        self.assertNotIn("Cheese", self.product_names(catalog))

    def test_on_demand_variant_without_stock_override_stays_listed(self):
        Variant.objects.filter(pk=self.banana_variant.pk).update(on_demand=True, count_on_hand=0)
        catalog = DistributedCatalog(self.order_cycle, self.distributor)
        self.assertIn("Bananas", self.product_names(catalog))

    def test_name_search_ignores_hidden_variants(self):
        secret = Variant.objects.create(
            product=self.apples, display_name="Secret Reserve", price="9.00", count_on_hand=5
        )
        self.order_cycle.exchanges.get(incoming=False).variants.add(secret)
        VariantOverride.objects.create(hub=self.distributor, variant=secret, tag_list="members")
        TagRule.objects.create(
            enterprise=self.distributor,
            is_default=True,
            preferred_variant_tags="members",
            preferred_matched_variants_visibility=VISIBILITY_HIDDEN,
        )

        catalog = DistributedCatalog(self.order_cycle, self.distributor, criteria=AllOf([NameContains("Secret")]))
        self.assertEqual(catalog.products(), [])

        catalog = DistributedCatalog(self.order_cycle, self.distributor, criteria=AllOf([NameContains("Apples")]))
        self.assertEqual(self.product_names(catalog), ["Apples"])
        self.assertEqual([variant.id for variant in catalog.products()[0].variants], [self.apple_variant.id])

    def test_name_search_ignores_variants_outside_the_exchange(self):
        Variant.objects.create(product=self.carrots, display_name="Purple Heritage", count_on_hand=5)
        catalog = DistributedCatalog(self.order_cycle, self.distributor, criteria=AllOf([NameContains("heritage")]))
        self.assertEqual(catalog.products(), [])

    def test_variant_without_stock_is_excluded(self):
        Variant.objects.filter(pk=self.banana_variant.pk).update(count_on_hand=0)
        catalog = DistributedCatalog(self.order_cycle, self.distributor)
        self.assertNotIn("Bananas", self.product_names(catalog))

    def test_override_price_applies_at_the_hub(self):
        catalog = DistributedCatalog(self.order_cycle, self.distributor)
        apples = catalog.products()[0]
        self.assertEqual(str(apples.variants[0].price), "1234.56")

    def test_distributor_outside_order_cycle_sees_nothing(self):
        catalog = DistributedCatalog(self.order_cycle, self.other_distributor)
        self.assertEqual(catalog.products(), [])
        self.assertEqual(catalog.taxons(), [])
        self.assertEqual(catalog.properties(), [])

    def test_missing_distributor_sees_nothing(self):
        self.assertEqual(DistributedCatalog(self.order_cycle, None).products(), [])

    def test_taxons_of_visible_products(self):
        catalog = DistributedCatalog(self.order_cycle, self.distributor)
        self.assertEqual(catalog.taxons(), [self.fruit, self.vegetables])

    def test_properties_include_producer_properties(self):
        catalog = DistributedCatalog(self.order_cycle, self.distributor)
        self.assertEqual(catalog.properties(), [self.local, self.organic])

        ProducerProperty.objects.create(producer=self.supplier, property=self.fair_trade, value="yes")
        catalog = DistributedCatalog(self.order_cycle, self.distributor)
        self.assertEqual(catalog.properties(), [self.fair_trade, self.local, self.organic])


class OrderCycleProductsApiTests(OrderCycleFixtureMixin, APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.build_order_cycle()
        self.products_url = reverse("order_cycles:order-cycle-products", args=[self.order_cycle.id])
        self.taxons_url = reverse("order_cycles:order-cycle-taxons", args=[self.order_cycle.id])
        self.properties_url = reverse("order_cycles:order-cycle-properties", args=[self.order_cycle.id])

    def get_products(self, params=None):
        query = {"distributor": str(self.distributor.id)}
        query.update(params or {})
        response = self.client.get(self.products_url, query)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        return response

    def product_names(self, response):
        return [product["name"] for product in response.data]

    def test_products_with_overrides(self):
        response = self.get_products()
        self.assertEqual(self.product_names(response), ["Apples", "Bananas", "Carrots"])
        self.assertEqual(response.data[0]["variants"][0]["price"], "1234.56")
        self.assertEqual(response.data[1]["variants"][0]["price"], "2.50")
        self.assertEqual(response.data[0]["supplier"]["name"], "Green Acres")

    def test_products_filtered_by_taxon(self):
        response = self.get_products({"q[primary_taxon_id_in_any][]": str(self.vegetables.id)})
        self.assertEqual(self.product_names(response), ["Carrots"])

    def test_products_filtered_by_several_taxons(self):
        response = self.get_products({
            "q[primary_taxon_id_in_any]": f"{self.vegetables.id},{self.dairy.id}",
        })
        self.assertEqual(self.product_names(response), ["Carrots"])

    def test_products_filtered_by_product_property(self):
        response = self.get_products({
            "q[properties_id_or_supplier_properties_id_in_any][]": str(self.organic.id),
        })
        self.assertEqual(self.product_names(response), ["Apples"])

    def test_products_filtered_by_producer_property(self):
        ProducerProperty.objects.create(producer=self.supplier, property=self.fair_trade)
        response = self.get_products({
            "q[properties_id_or_supplier_properties_id_in_any][]": str(self.fair_trade.id),
        })
        self.assertEqual(self.product_names(response), ["Apples", "Bananas", "Carrots"])

    def test_products_filtered_by_name(self):
        response = self.get_products({"q[name_cont]": "ban"})
        self.assertEqual(self.product_names(response), ["Bananas"])

    def test_invalid_ids_are_ignored(self):
        response = self.get_products({"q[primary_taxon_id_in_any][]": "not-a-uuid"})
        self.assertEqual(self.product_names(response), ["Apples", "Bananas", "Carrots"])

    def test_distributor_outside_order_cycle(self):
        response = self.client.get(self.products_url, {"distributor": str(self.other_distributor.id)})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_missing_or_malformed_distributor(self):
        self.assertEqual(self.client.get(self.products_url).data, [])
        self.assertEqual(self.client.get(self.products_url, {"distributor": "nope"}).data, [])

    def test_unknown_order_cycle(self):
        url = reverse("order_cycles:order-cycle-products", args=["00000000-0000-0000-0000-000000000000"])
        response = self.client.get(url, {"distributor": str(self.distributor.id)})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_taxons(self):
        response = self.client.get(self.taxons_url, {"distributor": str(self.distributor.id)})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)
        self.assertEqual([taxon["name"] for taxon in response.data], ["Fruit", "Vegetables"])

    def test_properties(self):
        response = self.client.get(self.properties_url, {"distributor": str(self.distributor.id)})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

        ProducerProperty.objects.create(producer=self.supplier, property=self.fair_trade)
        response = self.client.get(self.properties_url, {"distributor": str(self.distributor.id)})
        self.assertEqual(len(response.data), 3)
        self.assertEqual([prop["name"] for prop in response.data], ["Fair Trade", "Local", "Organic"])


class OrderCycleTagRuleApiTests(OrderCycleFixtureMixin, APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.build_order_cycle()
        self.products_url = reverse("order_cycles:order-cycle-products", args=[self.order_cycle.id])

        VariantOverride.objects.create(
            hub=self.distributor, variant=self.banana_variant, tag_list="members-only"
        )
        TagRule.objects.create(
            enterprise=self.distributor,
            is_default=True,
            preferred_variant_tags="members-only",
            preferred_matched_variants_visibility=VISIBILITY_HIDDEN,
        )

        self.member = User.objects.create_user(email="member@example.com", password="secret123")
        Customer.objects.create(enterprise=self.distributor, user=self.member, tag_list="member")
        self.retail = User.objects.create_user(email="retail@example.com", password="secret123")
        Customer.objects.create(enterprise=self.distributor, user=self.retail, tag_list="retail")

    def product_names(self):
        response = self.client.get(self.products_url, {"distributor": str(self.distributor.id)})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        return [product["name"] for product in response.data]

    def test_default_hidden_rule_applies_to_anonymous_shoppers(self):
        self.assertEqual(self.product_names(), ["Apples", "Carrots"])

    def test_customer_rule_shows_variant_hidden_by_default(self):
        TagRule.objects.create(
            enterprise=self.distributor,
            preferred_customer_tags="member",
            preferred_variant_tags="members-only",
            preferred_matched_variants_visibility=VISIBILITY_VISIBLE,
        )
        self.client.force_authenticate(user=self.member)
        self.assertEqual(self.product_names(), ["Apples", "Bananas", "Carrots"])

    def test_other_customers_still_see_default_rule(self):
        TagRule.objects.create(
            enterprise=self.distributor,
            preferred_customer_tags="member",
            preferred_variant_tags="members-only",
            preferred_matched_variants_visibility=VISIBILITY_VISIBLE,
        )
        self.client.force_authenticate(user=self.retail)
        self.assertEqual(self.product_names(), ["Apples", "Carrots"])

    def test_rules_of_other_enterprises_are_ignored(self):
        TagRule.objects.create(
            enterprise=self.other_distributor,
            preferred_customer_tags="member",
            preferred_variant_tags="members-only",
            preferred_matched_variants_visibility=VISIBILITY_VISIBLE,
        )
        self.client.force_authenticate(user=self.member)
        self.assertEqual(self.product_names(), ["Apples", "Carrots"])

    def test_customer_rule_hides_variant_from_that_customer(self):
        VariantOverride.objects.filter(variant=self.apple_variant).update(tag_list="wholesale")
        TagRule.objects.create(
            enterprise=self.distributor,
            preferred_customer_tags="member",
            preferred_variant_tags="wholesale",
            preferred_matched_variants_visibility=VISIBILITY_HIDDEN,
        )
        self.client.force_authenticate(user=self.member)
        self.assertEqual(self.product_names(), ["Carrots"])

        self.client.force_authenticate(user=self.retail)
        self.assertEqual(self.product_names(), ["Apples", "Carrots"])

    def test_name_search_does_not_reveal_hidden_variants(self):
        Variant.objects.filter(pk=self.banana_variant.pk).update(display_name="Lady Finger")
        response = self.client.get(
            self.products_url, {"distributor": str(self.distributor.id), "q[name_cont]": "finger"}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])
