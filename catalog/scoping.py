# catalog/scoping.py
from catalog.models import VariantOverride


class ScopedVariant:
    """
    A variant as sold by one hub: the hub's override values win over the
    variant's own price and stock wherever they are set.
    """

    def __init__(self, variant, override=None):
        self.variant = variant
        self.override = override

    def __getattr__(self, name):
        if name in ('variant', 'override'):
            raise AttributeError(name)
        return getattr(self.variant, name)

    @property
    def price(self):
        if self.override is not None and self.override.price is not None:
            return self.override.price
        return self.variant.price

    @property
    def count_on_hand(self):
        if self.override is not None and self.override.count_on_hand is not None:
            return self.override.count_on_hand
        return self.variant.count_on_hand

    @property
    def on_demand(self):
        if self.override is None:
            return self.variant.on_demand
        if self.override.on_demand is not None:
            return self.override.on_demand
        # an override that sets stock replaces the variant's stock settings
        if self.override.count_on_hand is not None:
            return False
        return self.variant.on_demand

    @property
    def tags(self):
        if self.override is None:
            return []
        return self.override.tags

    @property
    def in_stock(self):
        return self.on_demand or self.count_on_hand > 0


def scope_to_hub(variants, hub):
    variants = list(variants)
    overrides = VariantOverride.indexed_for_hub(hub, variants)
    return [ScopedVariant(variant, overrides.get(variant.id)) for variant in variants]
