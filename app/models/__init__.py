from app.models.user import User
from app.models.product import Product
from app.models.payment_request import PaymentRequest
from app.models.user_product_access import UserProductAccess
from app.models.notifications import Notification
from app.models.refund_request import RefundRequest
from app.models.contact_request import ContactRequest

# add ALL models here
