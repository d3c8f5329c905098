from unittest import mock

from app.config import settings
from app.constants.roles import ADMIN, SUPER_ADMIN, USER
from app.exceptions import ProtectedAccount, Unauthorized
from app.services import user_role_service

from tests.base import StorefrontTestCase


class UserRoleServiceTests(StorefrontTestCase):
    def setUp(self):
        super().setUp()
        self.super_admin = self.create_super_admin()
        self.admin = self.create_admin()
        self.buyer = self.create_user(username="buyer")

    def test_super_admin_promotes_user(self):
        user_role_service.assign_role(
            session=self.session, user_id=self.buyer.id, role=ADMIN, actor=self.super_admin
        )

        self.assertEqual(self.get_user(self.buyer.id).role, ADMIN)

    def test_admin_cannot_change_roles(self):
        with self.assertRaises(Unauthorized) as ctx:
            user_role_service.assign_role(
                session=self.session, user_id=self.buyer.id, role=ADMIN, actor=self.admin
            )

        self.assertIn("user roles", ctx.exception.message)
        self.assertEqual(self.get_user(self.buyer.id).role, USER)

    def test_own_role_is_fixed(self):
        with self.assertRaises(ProtectedAccount):
            user_role_service.assign_role(
                session=self.session, user_id=self.super_admin.id, role=USER, actor=self.super_admin
            )

    def test_owner_role_is_fixed(self):
        owner = self.create_user(role=SUPER_ADMIN, username="owner", email="Owner@Example.com")

        with mock.patch.object(settings, "OWNER_EMAIL", "owner@example.com"):
            with self.assertRaises(ProtectedAccount) as ctx:
                user_role_service.assign_role(
                    session=self.session, user_id=owner.id, role=USER, actor=self.super_admin
                )

        self.assertIn("owner", ctx.exception.message)
        self.assertEqual(self.get_user(owner.id).role, SUPER_ADMIN)

    def test_demoted_admin_loses_console(self):
        user_role_service.assign_role(
            session=self.session, user_id=self.admin.id, role=USER, actor=self.super_admin
        )

        resp = self.client.get("/admin/payment-requests", headers=self.auth_header_for(self.admin))

        self.assertEqual(resp.status_code, 403)


class UserRoleApiTests(StorefrontTestCase):
    def setUp(self):
        super().setUp()
        self.super_admin = self.create_super_admin()
        self.admin = self.create_admin()
        self.buyer = self.create_user(username="buyer")

    def test_role_endpoint(self):
        resp = self.client.patch(
            f"/admin/users/{self.buyer.id}/role",
            json={"role": "super_admin"},
            headers=self.auth_header_for(self.super_admin),
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["role"], SUPER_ADMIN)

    def test_role_endpoint_errors(self):
        url = f"/admin/users/{self.buyer.id}/role"

        resp = self.client.patch(url, json={"role": "admin"}, headers=self.auth_header_for(self.admin))
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["error"], "unauthorized")

        resp = self.client.patch(
            url, json={"role": "owner"}, headers=self.auth_header_for(self.super_admin)
        )
        self.assertEqual(resp.status_code, 422)

        resp = self.client.patch(
            f"/admin/users/{self.super_admin.id}/role",
            json={"role": "user"},
            headers=self.auth_header_for(self.super_admin),
        )
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["error"], "protected_account")

        resp = self.client.patch(
            "/admin/users/999/role", json={"role": "user"}, headers=self.auth_header_for(self.super_admin)
        )
        self.assertEqual(resp.status_code, 404)

    def test_staff_listing(self):
        resp = self.client.get(
            "/admin/users?staff_only=true", headers=self.auth_header_for(self.admin)
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["total_items"], 2)
        self.assertFalse(any(u["is_owner"] for u in resp.json()["results"]))
