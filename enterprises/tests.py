from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APITestCase, APIClient
from rest_framework import status
from authentication.models import Role
from enterprises.models import Enterprise, EnterpriseRole, Customer
from utils.constants import ROLE_ADMIN, SELLS_ANY, SELLS_NONE, SELLS_OWN

User = get_user_model()


class EnterpriseModelTests(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(email="owner@example.com")

    def test_permalink_is_generated_and_unique(self):
        first = Enterprise.objects.create(name="Fresh Farm", owner=self.owner)
        second = Enterprise.objects.create(name="Fresh  Farm!", owner=self.owner)
        self.assertEqual(first.permalink, "fresh-farm")
        self.assertEqual(second.permalink, "fresh-farm-1")

    def test_is_distributor(self):
        self.assertFalse(Enterprise(name="a", owner=self.owner, sells=SELLS_NONE).is_distributor)
        self.assertTrue(Enterprise(name="b", owner=self.owner, sells=SELLS_OWN).is_distributor)
        self.assertTrue(Enterprise(name="c", owner=self.owner, sells=SELLS_ANY).is_distributor)

    def test_manager_role_grants_management(self):
        hub = Enterprise.objects.create(name="Hub", owner=self.owner, sells=SELLS_ANY)
        manager = User.objects.create_user(email="manager@example.com")
        self.assertFalse(manager.manages(hub))
        EnterpriseRole.objects.create(user=manager, enterprise=hub)
        self.assertTrue(manager.manages(hub))


class CustomerModelTests(TestCase):
    def setUp(self):
        owner = User.objects.create_user(email="owner@example.com")
        self.hub = Enterprise.objects.create(name="Hub", owner=owner, sells=SELLS_ANY)
        self.shopper = User.objects.create_user(email="shopper@example.com")

    def test_email_defaults_to_users_email(self):
        customer = Customer.objects.create(enterprise=self.hub, user=self.shopper)
        self.assertEqual(customer.email, "shopper@example.com")

    def test_tags_are_normalized(self):
        customer = Customer.objects.create(enterprise=self.hub, user=self.shopper, tag_list="vip, member ,VIP")
        customer.refresh_from_db()
        self.assertEqual(customer.tag_list, "vip,member")
        self.assertEqual(customer.tags, ["vip", "member"])

    def test_for_user_at(self):
        customer = Customer.objects.create(enterprise=self.hub, user=self.shopper)
        self.assertEqual(Customer.for_user_at(self.shopper, self.hub), customer)
        stranger = User.objects.create_user(email="stranger@example.com")
        self.assertIsNone(Customer.for_user_at(stranger, self.hub))
        self.assertIsNone(Customer.for_user_at(None, self.hub))


class EnterpriseViewTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@example.com")
        self.admin.spree_roles.add(Role.objects.create(name=ROLE_ADMIN))
        self.owner = User.objects.create_user(email="owner@example.com")
        self.manager = User.objects.create_user(email="manager@example.com")
        self.hub = Enterprise.objects.create(name="Hub", owner=self.owner, sells=SELLS_ANY)
        self.list_url = reverse("enterprises:enterprise-list")

    def test_list_for_authenticated_users(self):
        self.client.force_authenticate(user=self.manager)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["name"] for item in response.data], ["Hub"])
        self.assertEqual(response.data[0]["owner"]["name"], "owner@example.com")

    def test_create_requires_admin(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.post(self.list_url, {"name": "New", "owner_id": str(self.owner.id)}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_creates_enterprise(self):
        self.client.force_authenticate(user=self.admin)
        data = {"name": "New Farm", "owner_id": str(self.owner.id), "is_primary_producer": True}
        response = self.client.post(self.list_url, data, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["permalink"], "new-farm")
        self.assertEqual(Enterprise.objects.get(name="New Farm").owner, self.owner)

    def test_assign_and_unassign_manager(self):
        self.client.force_authenticate(user=self.admin)
        assign_url = reverse("enterprises:enterprise-assign-manager", args=[self.hub.id])
        unassign_url = reverse("enterprises:enterprise-unassign-manager", args=[self.hub.id])

        response = self.client.post(assign_url, {"user_id": str(self.manager.id)}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(self.manager.manages(self.hub))

        response = self.client.post(assign_url, {"user_id": str(self.manager.id)}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(unassign_url, {"user_id": str(self.manager.id)}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(self.manager.manages(self.hub))

        response = self.client.post(unassign_url, {"user_id": str(self.manager.id)}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_assign_manager_requires_admin(self):
        self.client.force_authenticate(user=self.owner)
        url = reverse("enterprises:enterprise-assign-manager", args=[self.hub.id])
        response = self.client.post(url, {"user_id": str(self.manager.id)}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class CustomerViewTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(email="owner@example.com")
        self.stranger = User.objects.create_user(email="stranger@example.com")
        self.hub = Enterprise.objects.create(name="Hub", owner=self.owner, sells=SELLS_ANY)
        self.other_hub = Enterprise.objects.create(name="Other", owner=self.stranger, sells=SELLS_ANY)
        self.member = Customer.objects.create(enterprise=self.hub, email="member@example.com", tag_list="member")
        Customer.objects.create(enterprise=self.hub, email="plain@example.com")
        Customer.objects.create(enterprise=self.other_hub, email="elsewhere@example.com", tag_list="member")
        self.list_url = reverse("enterprises:customer-list")
        self.client.force_authenticate(user=self.owner)

    def test_lists_customers_of_managed_enterprises(self):
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["email"] for item in response.data], ["member@example.com", "plain@example.com"])

    def test_filters_by_tag(self):
        response = self.client.get(self.list_url, {"tags": "member"})
        self.assertEqual([item["email"] for item in response.data], ["member@example.com"])

    def test_create_customer_from_user(self):
        shopper = User.objects.create_user(email="shopper@example.com")
        data = {"enterprise_id": str(self.hub.id), "user_id": str(shopper.id), "tag_list": "vip , member"}
        response = self.client.post(self.list_url, data, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["email"], "shopper@example.com")
        self.assertEqual(response.data["tags"], ["vip", "member"])

    def test_duplicate_email_is_rejected(self):
        data = {"enterprise_id": str(self.hub.id), "email": "MEMBER@example.com"}
        response = self.client.post(self.list_url, data, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", response.data)

    def test_cannot_add_customer_to_unmanaged_enterprise(self):
        data = {"enterprise_id": str(self.other_hub.id), "email": "new@example.com"}
        response = self.client.post(self.list_url, data, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_edit_tags(self):
        url = reverse("enterprises:customer-detail", args=[self.member.id])
        response = self.client.patch(url, {"tag_list": "member,wholesale"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.member.refresh_from_db()
        self.assertEqual(self.member.tags, ["member", "wholesale"])

    def test_user_managing_nothing_is_forbidden(self):
        shopper = User.objects.create_user(email="shopper@example.com")
        self.client.force_authenticate(user=shopper)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
