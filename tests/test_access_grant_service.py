from unittest import mock

from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from app.constants import payment_request_status as status
from app.exceptions import (
    ConcurrentModification,
    InvalidTransition,
    NotFound,
    PersistenceError,
    Unauthorized,
)
from app.models.notifications import NotificationType
from app.models.payment_request import PaymentRequest
from app.services import access_grant_service

from tests.base import StorefrontTestCase


class AccessGrantServiceTests(StorefrontTestCase):
    def setUp(self):
        super().setUp()
        self.buyer = self.create_user(username="buyer")
        self.admin = self.create_admin()
        self.super_admin = self.create_super_admin()
        self.product = self.create_product(title="Premium Icon Pack", price=10.0)

    # ---------- approve ----------

    def test_approve_flow(self):
        r1 = self.create_request(self.buyer, self.product)

        access_grant_service.approve(
            session=self.session, request_id=r1.id, actor=self.admin, notes="looks good"
        )

        request = self.get_request(r1.id)
        self.assertEqual(request.status, status.APPROVED)
        self.assertEqual(request.admin_notes, "looks good")
        self.assertEqual(len(self.grants_for(self.buyer.id, self.product.id)), 1)

        notifications = self.notifications_for(self.buyer.id)
        self.assertEqual(len(notifications), 1)
        self.assertEqual(notifications[0].type, NotificationType.success)
        self.assertEqual(notifications[0].title, "Payment Approved!")
        self.assertIn("Premium Icon Pack", notifications[0].message)
        self.assertIn(f"Product ID: {self.product.id}", notifications[0].message)
        self.assertEqual(notifications[0].related_request_id, r1.id)
        self.assertFalse(notifications[0].is_read)

    def test_approve_twice_keeps_single_grant_and_notification(self):
        r1 = self.create_request(self.buyer, self.product)

        access_grant_service.approve(session=self.session, request_id=r1.id, actor=self.admin)
        access_grant_service.approve(session=self.session, request_id=r1.id, actor=self.admin)

        self.assertEqual(self.get_request(r1.id).status, status.APPROVED)
        self.assertEqual(len(self.grants_for(self.buyer.id, self.product.id)), 1)
        self.assertEqual(len(self.notifications_for(self.buyer.id)), 1)

    def test_approve_retry_keeps_new_notes(self):
        r1 = self.create_request(self.buyer, self.product)

        access_grant_service.approve(
            session=self.session, request_id=r1.id, actor=self.admin, notes="first look"
        )
        access_grant_service.approve(
            session=self.session, request_id=r1.id, actor=self.admin, notes="txn confirmed"
        )
        access_grant_service.approve(session=self.session, request_id=r1.id, actor=self.admin)

        self.assertEqual(self.get_request(r1.id).admin_notes, "txn confirmed")
        self.assertEqual(len(self.notifications_for(self.buyer.id)), 1)

    def test_approve_retry_repairs_missing_grant(self):
        r1 = self.create_request(self.buyer, self.product, request_status=status.APPROVED)

        access_grant_service.approve(session=self.session, request_id=r1.id, actor=self.admin)

        self.assertEqual(len(self.grants_for(self.buyer.id, self.product.id)), 1)
        self.assertEqual(self.notifications_for(self.buyer.id), [])

    def test_approve_reuses_existing_grant(self):
        r1 = self.create_request(self.buyer, self.product)
        self.create_grant(self.buyer, self.product)

        access_grant_service.approve(session=self.session, request_id=r1.id, actor=self.admin)

        self.assertEqual(len(self.grants_for(self.buyer.id, self.product.id)), 1)

    def test_approve_without_notification(self):
        r1 = self.create_request(self.buyer, self.product)

        access_grant_service.approve(
            session=self.session, request_id=r1.id, actor=self.admin, notify=False
        )

        self.assertEqual(self.get_request(r1.id).status, status.APPROVED)
        self.assertEqual(len(self.grants_for(self.buyer.id, self.product.id)), 1)
        self.assertEqual(self.notifications_for(self.buyer.id), [])

    def test_approve_rejected_request_is_invalid(self):
        r1 = self.create_request(self.buyer, self.product, request_status=status.REJECTED)

        with self.assertRaises(InvalidTransition):
            access_grant_service.approve(session=self.session, request_id=r1.id, actor=self.admin)

        self.assertEqual(self.grants_for(self.buyer.id, self.product.id), [])

    def test_approve_unknown_request(self):
        with self.assertRaises(NotFound) as ctx:
            access_grant_service.approve(session=self.session, request_id=9999, actor=self.admin)

        self.assertEqual(ctx.exception.request_id, 9999)

    def test_plain_user_cannot_approve(self):
        r1 = self.create_request(self.buyer, self.product)

        with self.assertRaises(Unauthorized):
            access_grant_service.approve(session=self.session, request_id=r1.id, actor=self.buyer)

        self.assertEqual(self.get_request(r1.id).status, status.PENDING)

    def test_super_admin_can_approve_and_reject(self):
        r1 = self.create_request(self.buyer, self.product)
        other = self.create_product(title="Font Bundle")
        r2 = self.create_request(self.buyer, other)

        access_grant_service.approve(session=self.session, request_id=r1.id, actor=self.super_admin)
        access_grant_service.reject(session=self.session, request_id=r2.id, actor=self.super_admin)

        self.assertEqual(self.get_request(r1.id).status, status.APPROVED)
        self.assertEqual(self.get_request(r2.id).status, status.REJECTED)

    # ---------- reject ----------

    def test_reject_stores_notes_without_grant_or_notification(self):
        r1 = self.create_request(self.buyer, self.product)

        access_grant_service.reject(
            session=self.session, request_id=r1.id, actor=self.admin, notes="no transfer found"
        )

        request = self.get_request(r1.id)
        self.assertEqual(request.status, status.REJECTED)
        self.assertEqual(request.admin_notes, "no transfer found")
        self.assertEqual(self.grants_for(self.buyer.id, self.product.id), [])
        self.assertEqual(self.notifications_for(self.buyer.id), [])

    def test_reject_approved_request_is_invalid(self):
        r1 = self.create_request(self.buyer, self.product, request_status=status.APPROVED)

        with self.assertRaises(InvalidTransition):
            access_grant_service.reject(session=self.session, request_id=r1.id, actor=self.admin)

    # ---------- revoke ----------

    def test_revoke_flow_without_notification(self):
        r1 = self.create_request(self.buyer, self.product)
        access_grant_service.approve(session=self.session, request_id=r1.id, actor=self.admin)
        before = len(self.notifications_for(self.buyer.id))

        access_grant_service.revoke(
            session=self.session, request_id=r1.id, actor=self.super_admin, notify=False
        )

        self.assertEqual(self.get_request(r1.id).status, status.PENDING)
        self.assertEqual(self.grants_for(self.buyer.id, self.product.id), [])
        self.assertEqual(len(self.notifications_for(self.buyer.id)), before)

    def test_revoke_with_notification(self):
        r1 = self.create_request(self.buyer, self.product, request_status=status.APPROVED)
        self.create_grant(self.buyer, self.product)

        access_grant_service.revoke(session=self.session, request_id=r1.id, actor=self.super_admin)

        notifications = self.notifications_for(self.buyer.id)
        self.assertEqual(len(notifications), 1)
        self.assertEqual(notifications[0].type, NotificationType.error)
        self.assertEqual(notifications[0].title, "Access Revoked")

    def test_revoke_then_approve_recreates_grant(self):
        r1 = self.create_request(self.buyer, self.product)
        access_grant_service.approve(session=self.session, request_id=r1.id, actor=self.admin)
        access_grant_service.revoke(session=self.session, request_id=r1.id, actor=self.super_admin)

        access_grant_service.approve(session=self.session, request_id=r1.id, actor=self.admin)

        self.assertEqual(self.get_request(r1.id).status, status.APPROVED)
        self.assertEqual(len(self.grants_for(self.buyer.id, self.product.id)), 1)

    def test_revoke_requires_approved(self):
        r1 = self.create_request(self.buyer, self.product)

        with self.assertRaises(InvalidTransition):
            access_grant_service.revoke(session=self.session, request_id=r1.id, actor=self.super_admin)

    def test_admin_cannot_revoke(self):
        r1 = self.create_request(self.buyer, self.product)
        access_grant_service.approve(session=self.session, request_id=r1.id, actor=self.admin)

        with self.assertRaises(Unauthorized):
            access_grant_service.revoke(session=self.session, request_id=r1.id, actor=self.admin)

        self.assertEqual(self.get_request(r1.id).status, status.APPROVED)
        self.assertEqual(len(self.grants_for(self.buyer.id, self.product.id)), 1)

    # ---------- re-approve ----------

    def test_re_approve_rejected_request(self):
        r1 = self.create_request(self.buyer, self.product, request_status=status.REJECTED)

        access_grant_service.re_approve(
            session=self.session,
            request_id=r1.id,
            actor=self.super_admin,
            notes="transfer arrived late",
        )

        request = self.get_request(r1.id)
        self.assertEqual(request.status, status.APPROVED)
        self.assertEqual(request.admin_notes, "transfer arrived late")
        self.assertEqual(len(self.grants_for(self.buyer.id, self.product.id)), 1)
        notifications = self.notifications_for(self.buyer.id)
        self.assertEqual([n.type for n in notifications], [NotificationType.success])

    def test_re_approve_without_notification(self):
        r1 = self.create_request(self.buyer, self.product, request_status=status.REJECTED)

        access_grant_service.re_approve(
            session=self.session, request_id=r1.id, actor=self.super_admin, notify=False
        )

        self.assertEqual(self.get_request(r1.id).status, status.APPROVED)
        self.assertEqual(len(self.grants_for(self.buyer.id, self.product.id)), 1)
        self.assertEqual(self.notifications_for(self.buyer.id), [])

    def test_re_approve_only_from_rejected(self):
        pending = self.create_request(self.buyer, self.product)
        approved = self.create_request(
            self.buyer, self.create_product(title="Font Bundle"), request_status=status.APPROVED
        )

        for request_id in (pending.id, approved.id):
            with self.assertRaises(InvalidTransition):
                access_grant_service.re_approve(
                    session=self.session, request_id=request_id, actor=self.super_admin
                )

    def test_admin_cannot_re_approve(self):
        r1 = self.create_request(self.buyer, self.product, request_status=status.REJECTED)

        with self.assertRaises(Unauthorized):
            access_grant_service.re_approve(session=self.session, request_id=r1.id, actor=self.admin)

        self.assertEqual(self.get_request(r1.id).status, status.REJECTED)

    # ---------- reset ----------

    def test_reset_approved_request(self):
        r2 = self.create_request(self.buyer, self.product, request_status=status.APPROVED)
        self.create_grant(self.buyer, self.product)

        result = access_grant_service.reset(
            session=self.session, request_id=r2.id, actor=self.super_admin, notify=True
        )

        self.assertIsNone(self.get_request(r2.id))
        self.assertEqual(self.grants_for(self.buyer.id, self.product.id), [])
        notifications = self.notifications_for(self.buyer.id)
        self.assertEqual(len(notifications), 1)
        self.assertEqual(notifications[0].type, NotificationType.info)
        self.assertEqual(notifications[0].related_request_id, r2.id)
        self.assertTrue(result["access_removed"])
        self.assertEqual(result["previous_status"], status.APPROVED)

    def test_reset_works_from_every_status(self):
        for i, request_status in enumerate(status.ALL_STATUSES):
            product = self.create_product(title=f"Pack {i}")
            request = self.create_request(self.buyer, product, request_status=request_status)

            result = access_grant_service.reset(
                session=self.session, request_id=request.id, actor=self.super_admin, notify=False
            )

            self.assertIsNone(self.get_request(request.id))
            self.assertFalse(result["access_removed"])

        self.assertEqual(self.notifications_for(self.buyer.id), [])

    def test_reset_allows_new_request_for_same_product(self):
        r1 = self.create_request(self.buyer, self.product, request_status=status.APPROVED)
        self.create_grant(self.buyer, self.product)

        access_grant_service.reset(session=self.session, request_id=r1.id, actor=self.super_admin)
        fresh = self.create_request(self.buyer, self.product)

        self.assertEqual(fresh.status, status.PENDING)
        access_grant_service.approve(session=self.session, request_id=fresh.id, actor=self.admin)
        self.assertEqual(len(self.grants_for(self.buyer.id, self.product.id)), 1)

    def test_admin_cannot_reset(self):
        r1 = self.create_request(self.buyer, self.product)

        with self.assertRaises(Unauthorized):
            access_grant_service.reset(session=self.session, request_id=r1.id, actor=self.admin)

        self.assertIsNotNone(self.get_request(r1.id))

    def test_reset_unknown_request(self):
        with self.assertRaises(NotFound):
            access_grant_service.reset(session=self.session, request_id=4242, actor=self.super_admin)

    # ---------- failures ----------

    def test_storage_failure_rolls_back_status(self):
        r1 = self.create_request(self.buyer, self.product)
        failure = OperationalError("INSERT INTO user_product_access", {}, Exception("db down"))

        with mock.patch.object(access_grant_service, "grant_access", side_effect=failure):
            with self.assertRaises(PersistenceError) as ctx:
                access_grant_service.approve(session=self.session, request_id=r1.id, actor=self.admin)

        self.assertIsInstance(ctx.exception.__cause__, OperationalError)
        self.assertEqual(self.get_request(r1.id).status, status.PENDING)
        self.assertEqual(self.grants_for(self.buyer.id, self.product.id), [])
        self.assertEqual(self.notifications_for(self.buyer.id), [])

    def test_storage_failure_while_loading_request(self):
        r1 = self.create_request(self.buyer, self.product)
        failure = OperationalError("SELECT payment_requests", {}, Exception("db down"))

        operations = [
            (access_grant_service.approve, self.admin),
            (access_grant_service.reject, self.admin),
            (access_grant_service.revoke, self.super_admin),
            (access_grant_service.re_approve, self.super_admin),
            (access_grant_service.reset, self.super_admin),
        ]
        for operation, actor in operations:
            with self.subTest(operation=operation.__name__):
                with mock.patch.object(self.session, "get", side_effect=failure):
                    with self.assertRaises(PersistenceError) as ctx:
                        operation(session=self.session, request_id=r1.id, actor=actor)

                self.assertEqual(ctx.exception.status_code, 503)
                self.assertIsInstance(ctx.exception.__cause__, OperationalError)

        self.assertEqual(self.get_request(r1.id).status, status.PENDING)

    def test_concurrent_decision_is_detected(self):
        r1 = self.create_request(self.buyer, self.product)
        self.session.get(PaymentRequest, r1.id)

        # another admin rejects behind this session's back
        self.session.execute(
            text("UPDATE payment_requests SET status = 'rejected' WHERE id = :id"),
            {"id": r1.id},
        )

        with self.assertRaises(ConcurrentModification):
            access_grant_service.approve(session=self.session, request_id=r1.id, actor=self.admin)

        self.assertEqual(self.grants_for(self.buyer.id, self.product.id), [])

    def test_error_messages_are_distinct(self):
        messages = {
            NotFound(request_id=1).message,
            InvalidTransition("revoke", status.PENDING, request_id=1).message,
            Unauthorized("reset", "super_admin", request_id=1).message,
            PersistenceError(request_id=1).message,
            ConcurrentModification(request_id=1).message,
        }
        self.assertEqual(len(messages), 5)
