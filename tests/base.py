import unittest

from fastapi.testclient import TestClient
from sqlmodel import Session, select

from app.constants import payment_request_status as status
from app.constants.roles import ADMIN, SUPER_ADMIN, USER
from app.database import create_db_and_tables, drop_db_and_tables, engine
from app.main import app
from app.models.contact_request import ContactRequest
from app.models.notifications import Notification
from app.models.payment_request import PaymentRequest
from app.models.product import Product
from app.models.refund_request import RefundRequest
from app.models.user import User
from app.models.user_product_access import UserProductAccess
from app.utils.cache_helpers import clear_product_caches
from app.utils.token import create_access_token


class StorefrontTestCase(unittest.TestCase):
    def setUp(self):
        create_db_and_tables()
        clear_product_caches()
        self.session = Session(engine)
        self.client = TestClient(app)
        self._user_seq = 0

    def tearDown(self):
        self.session.close()
        drop_db_and_tables()
        clear_product_caches()

    # ---------- fixtures ----------

    def create_user(self, role=USER, **kwargs) -> User:
        self._user_seq += 1
        name = kwargs.pop("username", f"{role}{self._user_seq}")
        user = User(
            first_name=kwargs.pop("first_name", name.title()),
            last_name=kwargs.pop("last_name", "Tester"),
            username=name,
            email=kwargs.pop("email", f"{name}@example.com"),
            role=role,
            **kwargs,
        )
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def create_admin(self) -> User:
        return self.create_user(role=ADMIN)

    def create_super_admin(self) -> User:
        return self.create_user(role=SUPER_ADMIN)

    def create_product(self, title="Premium Icon Pack", price=10.0, **kwargs) -> Product:
        product = Product(
            title=title,
            price=price,
            description=kwargs.pop("description", f"{title} description"),
            download_url=kwargs.pop("download_url", f"https://cdn.example.com/{title}.zip"),
            **kwargs,
        )
        self.session.add(product)
        self.session.commit()
        self.session.refresh(product)
        return product

    def create_request(self, user, product, request_status=status.PENDING, **kwargs) -> PaymentRequest:
        payment_request = PaymentRequest(
            user_id=user.id,
            product_id=product.id,
            payment_method=kwargs.pop("payment_method", "nayapay"),
            contact_method=kwargs.pop("contact_method", "whatsapp"),
            contact_value=kwargs.pop("contact_value", "+92 300 0000000"),
            transaction_id=kwargs.pop("transaction_id", "TXN-1001"),
            status=request_status,
            **kwargs,
        )
        self.session.add(payment_request)
        self.session.commit()
        self.session.refresh(payment_request)
        return payment_request

    def create_grant(self, user, product) -> UserProductAccess:
        access = UserProductAccess(user_id=user.id, product_id=product.id)
        self.session.add(access)
        self.session.commit()
        return access

    def create_refund(self, user, product, refund_status="pending", **kwargs) -> RefundRequest:
        refund = RefundRequest(
            user_id=user.id,
            product_id=product.id,
            reason=kwargs.pop("reason", "Files would not open"),
            contact_email=kwargs.pop("contact_email", user.email),
            status=refund_status,
            **kwargs,
        )
        self.session.add(refund)
        self.session.commit()
        self.session.refresh(refund)
        return refund

    def create_contact(self, contact_status="pending", **kwargs) -> ContactRequest:
        contact = ContactRequest(
            name=kwargs.pop("name", "Visitor"),
            email=kwargs.pop("email", "visitor@example.com"),
            subject=kwargs.pop("subject", "Custom order"),
            message=kwargs.pop("message", "Can you make a bundle for my team?"),
            status=contact_status,
            **kwargs,
        )
        self.session.add(contact)
        self.session.commit()
        self.session.refresh(contact)
        return contact

    def auth_header_for(self, user: User):
        token = create_access_token({"user_id": user.id})
        return {"Authorization": f"Bearer {token}"}

    # ---------- lookups ----------

    def reload(self):
        self.session.expire_all()

    def get_request(self, request_id):
        self.reload()
        return self.session.get(PaymentRequest, request_id)

    def get_refund(self, refund_id):
        self.reload()
        return self.session.get(RefundRequest, refund_id)

    def get_contact(self, contact_id):
        self.reload()
        return self.session.get(ContactRequest, contact_id)

    def get_user(self, user_id):
        self.reload()
        return self.session.get(User, user_id)

    def grants_for(self, user_id, product_id):
        self.reload()
        return self.session.exec(
            select(UserProductAccess)
            .where(UserProductAccess.user_id == user_id)
            .where(UserProductAccess.product_id == product_id)
        ).all()

    def notifications_for(self, user_id):
        self.reload()
        return self.session.exec(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.id)
        ).all()
