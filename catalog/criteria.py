# catalog/criteria.py
"""
Typed product filter criteria.

Each criterion renders to a Django ``Q`` for database filtering and can also
be checked against an already loaded object.
"""
import re
from django.db.models import Q
from tag_rules.matching import parse_tags, tags_match
from utils.helpers import parse_uuid_list, query_param_list


class Criterion:
    def to_q(self):
        raise NotImplementedError

    def is_satisfied_by(self, obj):
        raise NotImplementedError

    def within_variants(self, variant_ids):
        """Copy of this criterion that only looks at the given variants"""
        return self

    def __and__(self, other):
        return AllOf([self, other])


class AllOf(Criterion):
    def __init__(self, criteria=None):
        self.criteria = list(criteria or [])

    def __bool__(self):
        return bool(self.criteria)

    def __and__(self, other):
        return AllOf(self.criteria + [other])

    def to_q(self):
        q = Q()
        for criterion in self.criteria:
            q &= criterion.to_q()
        return q

    def is_satisfied_by(self, obj):
        return all(criterion.is_satisfied_by(obj) for criterion in self.criteria)

    def within_variants(self, variant_ids):
        return AllOf([criterion.within_variants(variant_ids) for criterion in self.criteria])


class TaxonIdIn(Criterion):
    def __init__(self, ids):
        self.ids = list(ids)

    def to_q(self):
        return Q(primary_taxon_id__in=self.ids)

    def is_satisfied_by(self, product):
        return product.primary_taxon_id in self.ids


class PropertyIdIn(Criterion):
    """Matches products carrying a property directly or through their supplier"""

    def __init__(self, ids):
        self.ids = list(ids)

    def to_q(self):
        return (
            Q(product_properties__property_id__in=self.ids)
            | Q(supplier__producer_properties__property_id__in=self.ids)
        )

    def is_satisfied_by(self, product):
        property_ids = {pp.property_id for pp in product.product_properties.all()}
        property_ids |= {pp.property_id for pp in product.supplier.producer_properties.all()}
        return bool(property_ids & set(self.ids))


class NameContains(Criterion):
    """
    Matches product, supplier or variant names. With ``variant_ids`` set only
    those variants' names count.
    """

    def __init__(self, text, variant_ids=None):
        self.text = text.strip()
        self.variant_ids = None if variant_ids is None else set(variant_ids)

    def within_variants(self, variant_ids):
        return NameContains(self.text, variant_ids)

    def to_q(self):
        variant_q = Q(variants__display_name__icontains=self.text)
        if self.variant_ids is not None:
            variant_q &= Q(variants__id__in=self.variant_ids)
        return Q(name__icontains=self.text) | variant_q | Q(supplier__name__icontains=self.text)

    def is_satisfied_by(self, product):
        text = self.text.lower()
        if text in product.name.lower() or text in product.supplier.name.lower():
            return True
        variants = product.variants
        if hasattr(variants, 'all'):
            variants = variants.all()
        return any(
            text in variant.display_name.lower()
            for variant in variants
            if self.variant_ids is None or variant.id in self.variant_ids
        )


class TagsIntersect(Criterion):
    """Matches objects whose comma-delimited tag field shares a tag with ``tags``"""

    def __init__(self, tags, field='tag_list'):
        self.tags = parse_tags(tags)
        self.field = field

    def to_q(self):
        q = Q(pk__in=[])
        for tag in self.tags:
            pattern = r'(^|,)\s*' + re.escape(tag) + r'\s*(,|$)'
            q |= Q(**{f"{self.field}__iregex": pattern})
        return q

    def is_satisfied_by(self, obj):
        return tags_match(getattr(obj, self.field), self.tags)


def product_criteria_from_params(params):
    """
    Build criteria from request query parameters. Unknown or malformed
    values are ignored rather than rejected.
    """
    criteria = AllOf()

    taxon_ids = parse_uuid_list(query_param_list(params, 'primary_taxon_id_in_any'))
    if taxon_ids:
        criteria = criteria & TaxonIdIn(taxon_ids)

    property_ids = parse_uuid_list(
        query_param_list(params, 'properties_id_or_supplier_properties_id_in_any')
    )
    if property_ids:
        criteria = criteria & PropertyIdIn(property_ids)

    names = [value for value in query_param_list(params, 'name_cont') if value.strip()]
    if names:
        criteria = criteria & NameContains(names[0])

    return criteria
