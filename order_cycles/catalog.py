# order_cycles/catalog.py
from collections import OrderedDict
from catalog.criteria import AllOf
from catalog.models import Product
from catalog.scoping import scope_to_hub
from enterprises.models import Customer
from tag_rules.evaluation import VisibilityRuleEvaluator
from tag_rules.models import TagRule
import logging

logger = logging.getLogger(__name__)


class DistributedProduct:
    def __init__(self, product, variants):
        self.product = product
        self.variants = variants

    def __getattr__(self, name):
        if name in ('product', 'variants'):
            raise AttributeError(name)
        return getattr(self.product, name)


class DistributedCatalog:
    """
    What a distributor offers in an order cycle, as seen by one customer.

    Starts from the variants on the outgoing exchange to the distributor,
    applies the distributor's variant overrides, drops anything out of
    stock or hidden by the distributor's tag rules, then narrows the
    products with the given criteria.
    """

    def __init__(self, order_cycle, distributor, customer=None, criteria=None):
        self.order_cycle = order_cycle
        self.distributor = distributor
        self.customer = customer
        self.criteria = criteria or AllOf()
        self._visible_variants = None

    @classmethod
    def for_request_user(cls, order_cycle, distributor, user, criteria=None):
        customer = Customer.for_user_at(user, distributor) if distributor else None
        return cls(order_cycle, distributor, customer=customer, criteria=criteria)

    @property
    def customer_tags(self):
        if self.customer is None:
            return []
        return self.customer.tags

    def rule_evaluator(self):
        return VisibilityRuleEvaluator(TagRule.objects.filter(enterprise=self.distributor))

    def is_distributing(self):
        return self.distributor is not None and self.order_cycle.has_distributor(self.distributor)

    def visible_variants(self):
        if self._visible_variants is not None:
            return self._visible_variants

        if not self.is_distributing():
            logger.debug(f"{self.distributor} does not distribute in order cycle {self.order_cycle.id}")
            self._visible_variants = []
            return self._visible_variants

        variants = self.order_cycle.variants_distributed_by(self.distributor).select_related(
            'product__supplier', 'product__primary_taxon'
        )
        evaluator = self.rule_evaluator()
        customer_tags = self.customer_tags

        self._visible_variants = [
            variant for variant in scope_to_hub(variants, self.distributor)
            if variant.in_stock and evaluator.is_visible(variant.tags, customer_tags)
        ]
        return self._visible_variants

    def products(self, apply_criteria=True):
        variants_by_product = OrderedDict()
        for variant in self.visible_variants():
            variants_by_product.setdefault(variant.product_id, []).append(variant)

        if not variants_by_product:
            return []

        products = Product.objects.filter(id__in=list(variants_by_product.keys()))
        if apply_criteria and self.criteria:
            variant_ids = [variant.id for variant in self.visible_variants()]
            products = products.filter(self.criteria.within_variants(variant_ids).to_q())

        products = products.select_related('supplier', 'primary_taxon').prefetch_related(
            'product_properties__property',
            'supplier__producer_properties__property',
        ).distinct().order_by('name', 'id')

        return [DistributedProduct(product, variants_by_product[product.id]) for product in products]

    def taxons(self):
        taxons = OrderedDict()
        for product in self.products(apply_criteria=False):
            taxons.setdefault(product.primary_taxon_id, product.primary_taxon)
        return sorted(taxons.values(), key=lambda taxon: taxon.name)

    def properties(self):
        properties = OrderedDict()
        for product in self.products(apply_criteria=False):
            for product_property in product.product_properties.all():
                properties.setdefault(product_property.property_id, product_property.property)
            for producer_property in product.supplier.producer_properties.all():
                properties.setdefault(producer_property.property_id, producer_property.property)
        return sorted(properties.values(), key=lambda prop: prop.presentation)
