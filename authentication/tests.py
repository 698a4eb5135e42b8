from django.test import TestCase
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APITestCase, APIClient
from rest_framework import status
from authentication.exceptions import DestroyWithOrdersError
from authentication.models import Address, Role
from authentication.serializers import UserCreateUpdateSerializer
from catalog.models import Taxon, Product, Variant
from enterprises.models import Enterprise
from orders.models import Order, LineItem
from utils.constants import ROLE_ADMIN, ROLE_USER, ORDER_STATE_COMPLETE, SELLS_ANY

User = get_user_model()


def create_completed_order(user):
    owner = User.objects.create_user(email=f"owner-{user.pk}@shop.test", password="secret123")
    shop = Enterprise.objects.create(name=f"Shop for {user.email}", owner=owner, sells=SELLS_ANY)
    taxon = Taxon.objects.create(name="Fruit")
    product = Product.objects.create(name="Apples", supplier=shop, primary_taxon=taxon)
    variant = Variant.objects.create(product=product, price="2.00", count_on_hand=10)
    order = Order.objects.create(user=user, email=user.email, distributor=shop)
    LineItem.objects.create(order=order, variant=variant, quantity=1, price="2.00")
    order.complete()
    return order


class CustomUserManagerTests(TestCase):
    def test_create_user(self):
        user = User.objects.create_user(email="Jane@Example.com", password="secret123")
        self.assertEqual(user.email, "jane@example.com")
        self.assertTrue(user.is_active)
        self.assertTrue(user.check_password("secret123"))

    def test_create_user_without_password(self):
        user = User.objects.create_user(email="nopass@example.com")
        self.assertFalse(user.has_usable_password())

    def test_create_user_duplicate_email(self):
        User.objects.create_user(email="dup@example.com")
        with self.assertRaisesMessage(ValidationError, "A user with this email already exists"):
            User.objects.create_user(email="dup@example.com")

    def test_create_superuser(self):
        user = User.objects.create_superuser(email="root@example.com", password="admin123")
        self.assertTrue(user.is_staff)
        self.assertTrue(user.is_superuser)
        self.assertTrue(user.is_admin)

    def test_registered_excludes_guest_accounts(self):
        User.objects.create_user(email="member@example.com")
        User.objects.create_user(email="guest-123@example.net")
        emails = list(User.objects.registered().values_list('email', flat=True))
        self.assertEqual(emails, ["member@example.com"])


class UserModelTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="shopper@example.com", password="secret123")

    def test_admin_role_makes_admin(self):
        self.assertFalse(self.user.is_admin)
        self.user.spree_roles.add(Role.objects.create(name=ROLE_ADMIN))
        self.assertTrue(self.user.is_admin)

    def test_generate_and_clear_api_key(self):
        self.user.generate_spree_api_key()
        self.user.refresh_from_db()
        self.assertEqual(len(self.user.spree_api_key), 48)

        self.user.clear_spree_api_key()
        self.user.refresh_from_db()
        self.assertIsNone(self.user.spree_api_key)

    def test_delete_with_completed_orders_is_refused(self):
        create_completed_order(self.user)
        with self.assertRaisesMessage(DestroyWithOrdersError, "Users with completed orders may not be deleted"):
            self.user.delete()
        self.assertTrue(User.objects.filter(pk=self.user.pk).exists())

    def test_delete_without_orders(self):
        self.user.delete()
        self.assertFalse(User.objects.filter(email="shopper@example.com").exists())

    def test_managed_enterprises(self):
        other = User.objects.create_user(email="other@example.com")
        owned = Enterprise.objects.create(name="Owned", owner=self.user)
        Enterprise.objects.create(name="Not mine", owner=other)
        self.assertEqual(list(self.user.managed_enterprises()), [owned])
        self.assertTrue(self.user.manages(owned))


class UserCreateUpdateSerializerTests(TestCase):
    def setUp(self):
        self.role = Role.objects.create(name=ROLE_USER)

    def test_rejects_unknown_role(self):
        serializer = UserCreateUpdateSerializer(data={"email": "new@example.com", "spree_role_ids": ["999"]})
        self.assertFalse(serializer.is_valid())
        self.assertIn("spree_role_ids", serializer.errors)

    def test_rejects_non_numeric_role(self):
        serializer = UserCreateUpdateSerializer(data={"email": "new@example.com", "spree_role_ids": ["abc"]})
        self.assertFalse(serializer.is_valid())

    def test_creates_user_with_roles(self):
        serializer = UserCreateUpdateSerializer(data={
            "email": "new@example.com",
            "password": "secret123",
            "spree_role_ids": [str(self.role.id), ""],
        })
        self.assertTrue(serializer.is_valid(), serializer.errors)
        user = serializer.save()
        self.assertEqual(list(user.spree_roles.all()), [self.role])
        self.assertTrue(user.check_password("secret123"))


class AdminUserViewTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin_role = Role.objects.create(name=ROLE_ADMIN)
        self.user_role = Role.objects.create(name=ROLE_USER)
        self.admin = User.objects.create_user(email="admin@example.com", password="admin123")
        self.admin.spree_roles.add(self.admin_role)

        self.alice = User.objects.create_user(email="alice@example.com", password="secret123")
        self.alice.bill_address = Address.objects.create(firstname="Alice", lastname="Walker", city="Melbourne")
        self.alice.save()
        self.bob = User.objects.create_user(email="bob@example.com", password="secret123")
        self.bob.ship_address = Address.objects.create(firstname="Robert", lastname="Alder", city="Hobart")
        self.bob.save()
        self.guest = User.objects.create_user(email="guest-1@example.net")

        self.list_url = reverse("authentication:admin-user-list")
        self.client.force_authenticate(user=self.admin)

    def detail_url(self, user):
        return reverse("authentication:admin-user-detail", args=[user.pk])

    def test_requires_admin(self):
        self.client.force_authenticate(user=self.alice)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_registered_users_paginated(self):
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        emails = [user["email"] for user in response.data["results"]]
        self.assertIn("alice@example.com", emails)
        self.assertNotIn("guest-1@example.net", emails)
        self.assertEqual(response.data["count"], 3)

    def test_list_default_json_includes_addresses(self):
        response = self.client.get(self.list_url, {"q[email_cont]": "alice"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["results"]), 1)
        user = response.data["results"][0]
        self.assertEqual(set(user.keys()), {"id", "email", "bill_address", "ship_address"})
        self.assertEqual(user["bill_address"]["firstname"], "Alice")
        self.assertIsNone(user["ship_address"])

    def test_list_basic_json(self):
        response = self.client.get(self.list_url, {"json_format": "basic", "q[email_cont]": "bob"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["results"], [{"id": str(self.bob.pk), "name": "bob@example.com"}])

    def test_list_filters_by_firstname_on_addresses(self):
        response = self.client.get(self.list_url, {"q[firstname_cont]": "robert"})
        emails = [user["email"] for user in response.data["results"]]
        self.assertEqual(emails, ["bob@example.com"])

    def test_autocomplete_search_matches_email_and_names(self):
        response = self.client.get(
            self.list_url, {"q": "al", "json_format": "basic"}, HTTP_X_REQUESTED_WITH="XMLHttpRequest"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        # alice by email and first name, bob by ship address last name
        self.assertEqual([user["name"] for user in response.data], ["alice@example.com", "bob@example.com"])

    def test_autocomplete_search_respects_limit(self):
        response = self.client.get(
            self.list_url, {"q": "al", "limit": "1"}, HTTP_X_REQUESTED_WITH="XMLHttpRequest"
        )
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["email"], "alice@example.com")

    def test_create_user(self):
        data = {
            "email": "new@example.com",
            "password": "secret123",
            "spree_role_ids": [str(self.user_role.id)],
        }
        response = self.client.post(self.list_url, data, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["message"], "Created successfully")
        user = User.objects.get(email="new@example.com")
        self.assertEqual(list(user.spree_roles.values_list("name", flat=True)), [ROLE_USER])

    def test_create_user_duplicate_email(self):
        response = self.client.post(self.list_url, {"email": "ALICE@example.com"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", response.data)

    def test_update_email(self):
        response = self.client.patch(self.detail_url(self.alice), {"email": "alice@new.example.com"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Email updated")
        self.alice.refresh_from_db()
        self.assertEqual(self.alice.email, "alice@new.example.com")

    def test_update_account_roles(self):
        response = self.client.patch(
            self.detail_url(self.alice), {"spree_role_ids": [str(self.admin_role.id)]}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Account updated")
        self.assertTrue(self.alice.is_admin)

    def test_update_own_password_issues_tokens(self):
        response = self.client.patch(self.detail_url(self.admin), {"password": "changed123"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)
        self.admin.refresh_from_db()
        self.assertTrue(self.admin.check_password("changed123"))

    def test_update_other_password_issues_no_tokens(self):
        response = self.client.patch(self.detail_url(self.alice), {"password": "changed123"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertNotIn("access", response.data)

    def test_destroy_user(self):
        response = self.client.delete(self.detail_url(self.bob))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=self.bob.pk).exists())

    def test_destroy_user_with_completed_orders(self):
        create_completed_order(self.alice)
        response = self.client.delete(self.detail_url(self.alice))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data, {"error": "Users with completed orders may not be deleted"})
        self.assertTrue(User.objects.filter(pk=self.alice.pk).exists())

    def test_destroy_user_owning_enterprise(self):
        Enterprise.objects.create(name="Bob's Farm", owner=self.bob)
        response = self.client.delete(self.detail_url(self.bob))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_generate_and_clear_api_key(self):
        url = reverse("authentication:admin-user-generate-api-key", args=[self.alice.pk])
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["user"]["has_api_key"])

        url = reverse("authentication:admin-user-clear-api-key", args=[self.alice.pk])
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["user"]["has_api_key"])


class ApiKeyAuthenticationTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_superuser(email="root@example.com", password="admin123")
        self.admin.generate_spree_api_key()
        self.url = reverse("authentication:admin-user-list")

    def test_header_token_authenticates(self):
        response = self.client.get(self.url, HTTP_X_SPREE_TOKEN=self.admin.spree_api_key)
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_query_token_authenticates(self):
        response = self.client.get(self.url, {"token": self.admin.spree_api_key})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_unknown_token_is_rejected(self):
        response = self.client.get(self.url, HTTP_X_SPREE_TOKEN="not-a-key")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_inactive_user_is_rejected(self):
        self.admin.is_active = False
        self.admin.save()
        response = self.client.get(self.url, HTTP_X_SPREE_TOKEN=self.admin.spree_api_key)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
