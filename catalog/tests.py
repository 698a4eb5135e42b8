from decimal import Decimal
from django.contrib.auth import get_user_model
from django.http import QueryDict
from django.test import TestCase
from catalog.criteria import (
    AllOf, TaxonIdIn, PropertyIdIn, NameContains, TagsIntersect, product_criteria_from_params
)
from catalog.models import Taxon, Property, Product, ProductProperty, ProducerProperty, Variant, VariantOverride
from catalog.scoping import ScopedVariant, scope_to_hub
from enterprises.models import Enterprise, Customer
from utils.constants import SELLS_ANY

User = get_user_model()


class CatalogTestCase(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(email="owner@example.com")
        self.supplier = Enterprise.objects.create(name="Hill Farm", owner=self.owner, is_primary_producer=True)
        self.hub = Enterprise.objects.create(name="Town Hub", owner=self.owner, sells=SELLS_ANY)
        self.fruit = Taxon.objects.create(name="Fruit")
        self.herbs = Taxon.objects.create(name="Herbs")
        self.organic = Property.objects.create(name="organic", presentation="Organic")
        self.biodynamic = Property.objects.create(name="biodynamic", presentation="Biodynamic")

        self.pears = Product.objects.create(name="Pears", supplier=self.supplier, primary_taxon=self.fruit)
        self.basil = Product.objects.create(name="Basil", supplier=self.supplier, primary_taxon=self.herbs)
        ProductProperty.objects.create(product=self.pears, property=self.organic)
        self.pear_variant = Variant.objects.create(
            product=self.pears, display_name="Williams", unit_description="500g",
            price=Decimal("4.00"), count_on_hand=3
        )


class VariantTests(CatalogTestCase):
    def test_full_name(self):
        self.assertEqual(self.pear_variant.full_name, "Pears - Williams 500g")
        bare = Variant.objects.create(product=self.basil)
        self.assertEqual(bare.full_name, "Basil")

    def test_override_tags_are_normalized(self):
        override = VariantOverride.objects.create(hub=self.hub, variant=self.pear_variant, tag_list=" a , b,,a")
        override.refresh_from_db()
        self.assertEqual(override.tag_list, "a,b")
        self.assertEqual(override.tags, ["a", "b"])


class ScopedVariantTests(CatalogTestCase):
    def test_without_override_uses_variant_values(self):
        scoped = ScopedVariant(self.pear_variant)
        self.assertEqual(scoped.price, Decimal("4.00"))
        self.assertEqual(scoped.count_on_hand, 3)
        self.assertFalse(scoped.on_demand)
        self.assertTrue(scoped.in_stock)
        self.assertEqual(scoped.tags, [])
        self.assertEqual(scoped.full_name, "Pears - Williams 500g")

    def test_override_values_win(self):
        override = VariantOverride(
            hub=self.hub, variant=self.pear_variant, price=Decimal("5.50"), count_on_hand=0, tag_list="local"
        )
        scoped = ScopedVariant(self.pear_variant, override)
        self.assertEqual(scoped.price, Decimal("5.50"))
        self.assertEqual(scoped.count_on_hand, 0)
        self.assertFalse(scoped.in_stock)
        self.assertEqual(scoped.tags, ["local"])

    def test_on_demand_override_is_in_stock(self):
        override = VariantOverride(hub=self.hub, variant=self.pear_variant, count_on_hand=0, on_demand=True)
        self.assertTrue(ScopedVariant(self.pear_variant, override).in_stock)

    def test_stock_override_replaces_on_demand_variant(self):
        self.pear_variant.on_demand = True
        override = VariantOverride(hub=self.hub, variant=self.pear_variant, count_on_hand=0)
        scoped = ScopedVariant(self.pear_variant, override)
        self.assertFalse(scoped.on_demand)
        self.assertFalse(scoped.in_stock)

    def test_price_only_override_keeps_on_demand(self):
        self.pear_variant.on_demand = True
        self.pear_variant.count_on_hand = 0
        override = VariantOverride(hub=self.hub, variant=self.pear_variant, price=Decimal("5.00"))
        self.assertTrue(ScopedVariant(self.pear_variant, override).in_stock)

    def test_scope_to_hub_only_uses_that_hubs_overrides(self):
        other_hub = Enterprise.objects.create(name="Other Hub", owner=self.owner, sells=SELLS_ANY)
        VariantOverride.objects.create(hub=other_hub, variant=self.pear_variant, price=Decimal("9.99"))
        scoped = scope_to_hub(Variant.objects.all(), self.hub)
        self.assertEqual([variant.price for variant in scoped], [Decimal("4.00")])


class CriteriaTests(CatalogTestCase):
    def filtered_names(self, criterion):
        products = Product.objects.filter(criterion.to_q()).distinct().order_by('name')
        return [product.name for product in products]

    def test_taxon_id_in(self):
        criterion = TaxonIdIn([self.herbs.id])
        self.assertEqual(self.filtered_names(criterion), ["Basil"])
        self.assertTrue(criterion.is_satisfied_by(self.basil))
        self.assertFalse(criterion.is_satisfied_by(self.pears))

    def test_property_id_in_checks_product_and_producer_properties(self):
        criterion = PropertyIdIn([self.biodynamic.id])
        self.assertEqual(self.filtered_names(criterion), [])
        self.assertFalse(criterion.is_satisfied_by(self.basil))

        ProducerProperty.objects.create(producer=self.supplier, property=self.biodynamic)
        self.assertEqual(self.filtered_names(criterion), ["Basil", "Pears"])
        self.assertTrue(criterion.is_satisfied_by(self.basil))

    def test_name_contains_checks_variants_and_supplier(self):
        self.assertEqual(self.filtered_names(NameContains("william")), ["Pears"])
        self.assertEqual(self.filtered_names(NameContains("hill")), ["Basil", "Pears"])
        self.assertTrue(NameContains("BAS").is_satisfied_by(self.basil))

    def test_name_contains_within_variants(self):
        Variant.objects.create(product=self.basil, display_name="Thai")
        criterion = AllOf([NameContains("thai")]).within_variants([self.pear_variant.id])
        self.assertEqual(self.filtered_names(criterion), [])
        self.assertFalse(criterion.is_satisfied_by(self.basil))
        self.assertEqual(self.filtered_names(NameContains("thai")), ["Basil"])

    def test_all_of_combines_criteria(self):
        criterion = TaxonIdIn([self.fruit.id, self.herbs.id]) & PropertyIdIn([self.organic.id])
        self.assertIsInstance(criterion, AllOf)
        self.assertEqual(self.filtered_names(criterion), ["Pears"])
        self.assertTrue(criterion.is_satisfied_by(self.pears))
        self.assertFalse(criterion.is_satisfied_by(self.basil))

    def test_empty_all_of_is_falsy_and_matches_everything(self):
        criterion = AllOf()
        self.assertFalse(criterion)
        self.assertEqual(self.filtered_names(criterion), ["Basil", "Pears"])

    def test_tags_intersect(self):
        member = Customer.objects.create(enterprise=self.hub, email="m@example.com", tag_list="member,vip")
        Customer.objects.create(enterprise=self.hub, email="r@example.com", tag_list="retail,members")
        criterion = TagsIntersect("Member")
        self.assertEqual(list(Customer.objects.filter(criterion.to_q())), [member])
        self.assertTrue(criterion.is_satisfied_by(member))

    def test_tags_intersect_without_tags_matches_nothing(self):
        Customer.objects.create(enterprise=self.hub, email="m@example.com", tag_list="member")
        self.assertFalse(Customer.objects.filter(TagsIntersect("").to_q()).exists())


class CriteriaFromParamsTests(CatalogTestCase):
    def test_reads_ransack_style_keys(self):
        params = QueryDict(mutable=True)
        params.setlist("q[primary_taxon_id_in_any][]", [str(self.fruit.id)])
        params["q[name_cont]"] = "pear"
        criteria = product_criteria_from_params(params)
        self.assertEqual(len(criteria.criteria), 2)
        self.assertTrue(criteria.is_satisfied_by(self.pears))
        self.assertFalse(criteria.is_satisfied_by(self.basil))

    def test_invalid_ids_leave_no_criterion(self):
        params = QueryDict(mutable=True)
        params.setlist("q[primary_taxon_id_in_any][]", ["", "bogus"])
        params["q[properties_id_or_supplier_properties_id_in_any]"] = "also-bogus"
        self.assertFalse(product_criteria_from_params(params))

    def test_comma_separated_ids(self):
        params = QueryDict(mutable=True)
        params["q[properties_id_or_supplier_properties_id_in_any]"] = f"{self.organic.id}, bogus"
        criteria = product_criteria_from_params(params)
        self.assertEqual(criteria.criteria[0].ids, [self.organic.id])
