from pydantic import BaseModel


class PaymentRequestStats(BaseModel):
    pending_requests: int
    approved_requests: int
    rejected_requests: int
    total_requests: int
    total_revenue: float


class DashboardStats(PaymentRequestStats):
    total_users: int
    total_products: int
    pending_refund_requests: int = 0
    pending_contact_requests: int = 0
