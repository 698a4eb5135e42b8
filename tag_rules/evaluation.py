# tag_rules/evaluation.py
from tag_rules.matching import tags_match
from utils.constants import VISIBILITY_VISIBLE, VISIBILITY_HIDDEN


class VisibilityRuleEvaluator:
    """
    Decides whether a variant is shown to a customer at a distributor.

    Rules are consulted in an explicit priority order: first the rules aimed
    at one of the customer's tags, then the enterprise-wide default rules.
    Each group is sorted by priority; ties keep the order the rules were
    given in (creation order when loaded through the model). The first rule
    whose variant tags match the variant decides. When nothing matches the
    variant stays visible.
    """

    def __init__(self, rules):
        self.rules = sorted(rules, key=lambda rule: rule.priority)

    def customer_rules(self, customer_tags):
        return [
            rule for rule in self.rules
            if not rule.is_default
            and rule.customer_tags
            and tags_match(customer_tags, rule.customer_tags)
        ]

    def default_rules(self):
        return [rule for rule in self.rules if rule.is_default]

    def priority_list(self, customer_tags):
        return self.customer_rules(customer_tags) + self.default_rules()

    def deciding_rule(self, variant_tags, customer_tags):
        for rule in self.priority_list(customer_tags):
            if tags_match(variant_tags, rule.variant_tags):
                return rule
        return None

    def visibility(self, variant_tags, customer_tags=None):
        rule = self.deciding_rule(variant_tags, customer_tags or [])
        if rule is None:
            return VISIBILITY_VISIBLE
        return rule.preferred_matched_variants_visibility

    def is_visible(self, variant_tags, customer_tags=None):
        return self.visibility(variant_tags, customer_tags) != VISIBILITY_HIDDEN
