from django.test import SimpleTestCase, TestCase
from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework.test import APITestCase, APIClient
from rest_framework import status
from enterprises.models import Enterprise, EnterpriseRole
from tag_rules.evaluation import VisibilityRuleEvaluator
from tag_rules.matching import parse_tags, format_tags, tags_match
from tag_rules.models import TagRule
from utils.constants import VISIBILITY_VISIBLE, VISIBILITY_HIDDEN, SELLS_ANY

User = get_user_model()


class TagMatchingTests(SimpleTestCase):
    def test_parse_tags_trims_and_drops_blanks(self):
        self.assertEqual(parse_tags(" member, ,wholesale ,"), ["member", "wholesale"])

    def test_parse_tags_drops_case_insensitive_duplicates(self):
        self.assertEqual(parse_tags("Member,member,MEMBER,vip"), ["Member", "vip"])

    def test_parse_tags_accepts_lists_and_empty_values(self):
        self.assertEqual(parse_tags(["a", " b "]), ["a", "b"])
        self.assertEqual(parse_tags(None), [])
        self.assertEqual(parse_tags(""), [])

    def test_format_tags(self):
        self.assertEqual(format_tags(" organic , local"), "organic,local")

    def test_tags_match_ignores_case(self):
        self.assertTrue(tags_match(["Organic"], "organic,local"))
        self.assertFalse(tags_match(["organic"], "local"))
        self.assertFalse(tags_match([], "local"))
        self.assertFalse(tags_match(["local"], ""))


def rule(variant_tags, visibility, customer_tags='', is_default=False, priority=100):
    return TagRule(
        is_default=is_default,
        priority=priority,
        preferred_customer_tags=customer_tags,
        preferred_variant_tags=variant_tags,
        preferred_matched_variants_visibility=visibility,
    )


class VisibilityRuleEvaluatorTests(SimpleTestCase):
    def test_no_rules_means_visible(self):
        evaluator = VisibilityRuleEvaluator([])
        self.assertTrue(evaluator.is_visible(["member"], ["member"]))

    def test_unmatched_variant_is_visible(self):
        evaluator = VisibilityRuleEvaluator([rule("member", VISIBILITY_HIDDEN, is_default=True)])
        self.assertTrue(evaluator.is_visible(["other"], []))
        self.assertTrue(evaluator.is_visible([], []))

    def test_default_rule_hides_tagged_variants(self):
        evaluator = VisibilityRuleEvaluator([rule("member", VISIBILITY_HIDDEN, is_default=True)])
        self.assertFalse(evaluator.is_visible(["member"]))

    def test_customer_rule_overrides_default_rule(self):
        evaluator = VisibilityRuleEvaluator([
            rule("member", VISIBILITY_HIDDEN, is_default=True),
            rule("member", VISIBILITY_VISIBLE, customer_tags="member"),
        ])
        self.assertTrue(evaluator.is_visible(["member"], ["member"]))
        self.assertFalse(evaluator.is_visible(["member"], ["retail"]))
        self.assertFalse(evaluator.is_visible(["member"], []))

    def test_customer_rule_can_hide(self):
        evaluator = VisibilityRuleEvaluator([
            rule("wholesale", VISIBILITY_HIDDEN, customer_tags="retail"),
        ])
        self.assertFalse(evaluator.is_visible(["wholesale"], ["Retail"]))
        self.assertTrue(evaluator.is_visible(["wholesale"], ["trade"]))

    def test_lower_priority_number_wins(self):
        evaluator = VisibilityRuleEvaluator([
            rule("member", VISIBILITY_VISIBLE, customer_tags="member", priority=20),
            rule("member", VISIBILITY_HIDDEN, customer_tags="member", priority=10),
        ])
        self.assertEqual(evaluator.visibility(["member"], ["member"]), VISIBILITY_HIDDEN)

    def test_equal_priority_keeps_given_order(self):
        first = rule("member", VISIBILITY_VISIBLE, customer_tags="member")
        second = rule("member", VISIBILITY_HIDDEN, customer_tags="member")
        self.assertIs(VisibilityRuleEvaluator([first, second]).deciding_rule(["member"], ["member"]), first)
        self.assertIs(VisibilityRuleEvaluator([second, first]).deciding_rule(["member"], ["member"]), second)

    def test_priority_list_puts_customer_rules_first(self):
        default = rule("member", VISIBILITY_HIDDEN, is_default=True, priority=1)
        targeted = rule("member", VISIBILITY_VISIBLE, customer_tags="member", priority=50)
        unrelated = rule("member", VISIBILITY_HIDDEN, customer_tags="vip", priority=1)
        evaluator = VisibilityRuleEvaluator([default, targeted, unrelated])
        self.assertEqual(evaluator.priority_list(["member"]), [targeted, default])

    def test_non_default_rule_without_customer_tags_never_applies(self):
        evaluator = VisibilityRuleEvaluator([rule("member", VISIBILITY_HIDDEN)])
        self.assertTrue(evaluator.is_visible(["member"], ["member"]))


class TagRuleModelTests(TestCase):
    def setUp(self):
        owner = User.objects.create_user(email="owner@example.com")
        self.hub = Enterprise.objects.create(name="Hub", owner=owner, sells=SELLS_ANY)

    def test_save_normalizes_tags(self):
        tag_rule = TagRule.objects.create(
            enterprise=self.hub,
            preferred_customer_tags=" member , vip,,",
            preferred_variant_tags="members-only",
        )
        tag_rule.refresh_from_db()
        self.assertEqual(tag_rule.preferred_customer_tags, "member,vip")
        self.assertEqual(tag_rule.customer_tags, ["member", "vip"])
        self.assertFalse(tag_rule.hides_matched)

    def test_ordering_breaks_priority_ties_by_creation(self):
        first = TagRule.objects.create(enterprise=self.hub, priority=5, preferred_customer_tags="a")
        second = TagRule.objects.create(enterprise=self.hub, priority=5, preferred_customer_tags="b")
        earliest = TagRule.objects.create(enterprise=self.hub, priority=1, preferred_customer_tags="c")
        self.assertEqual(list(self.hub.tag_rules.all()), [earliest, first, second])


class TagRuleViewTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(email="owner@example.com")
        self.manager = User.objects.create_user(email="manager@example.com")
        self.stranger = User.objects.create_user(email="stranger@example.com")
        self.hub = Enterprise.objects.create(name="Hub", owner=self.owner, sells=SELLS_ANY)
        self.other_hub = Enterprise.objects.create(name="Other Hub", owner=self.stranger, sells=SELLS_ANY)
        EnterpriseRole.objects.create(user=self.manager, enterprise=self.hub)

        self.rule = TagRule.objects.create(
            enterprise=self.hub, is_default=True, preferred_variant_tags="member",
            preferred_matched_variants_visibility=VISIBILITY_HIDDEN,
        )
        TagRule.objects.create(enterprise=self.other_hub, is_default=True, preferred_variant_tags="x")
        self.list_url = reverse("tag_rules:tag-rule-list")

    def test_lists_rules_of_managed_enterprises(self):
        self.client.force_authenticate(user=self.manager)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data], [str(self.rule.id)])
        self.assertEqual(response.data[0]["variant_tags"], ["member"])

    def test_user_managing_nothing_is_forbidden(self):
        shopper = User.objects.create_user(email="shopper@example.com")
        self.client.force_authenticate(user=shopper)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_rule(self):
        self.client.force_authenticate(user=self.owner)
        data = {
            "enterprise_id": str(self.hub.id),
            "preferred_customer_tags": "member",
            "preferred_variant_tags": "member",
            "preferred_matched_variants_visibility": VISIBILITY_VISIBLE,
            "priority": 10,
        }
        response = self.client.post(self.list_url, data, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(self.hub.tag_rules.count(), 2)

    def test_create_requires_customer_tags_unless_default(self):
        self.client.force_authenticate(user=self.owner)
        data = {"enterprise_id": str(self.hub.id), "preferred_variant_tags": "member"}
        response = self.client.post(self.list_url, data, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("preferred_customer_tags", response.data)

    def test_cannot_create_rule_for_unmanaged_enterprise(self):
        self.client.force_authenticate(user=self.manager)
        data = {"enterprise_id": str(self.other_hub.id), "is_default": True, "preferred_variant_tags": "x"}
        response = self.client.post(self.list_url, data, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("enterprise_id", response.data)

    def test_update_rule(self):
        self.client.force_authenticate(user=self.manager)
        url = reverse("tag_rules:tag-rule-detail", args=[self.rule.id])
        response = self.client.patch(url, {"preferred_variant_tags": "member, vip"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.rule.refresh_from_db()
        self.assertEqual(self.rule.preferred_variant_tags, "member,vip")
