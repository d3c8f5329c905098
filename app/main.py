import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from app.config import settings
from app.database import create_db_and_tables
from app.exceptions import PaymentRequestError
from app.logging_config import init_logging
from app.routes import (
    admin_analytics,
    admin_contact_requests,
    admin_payment_requests,
    admin_refund_requests,
    admin_users,
    contact_requests,
    health,
    notifications,
    payment_requests,
    products_admin,
    products_public,
    refund_requests,
    user_library,
)

init_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.ENV == "local":
        create_db_and_tables()
    yield

app = FastAPI(title=f"{settings.STORE_NAME} API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PaymentRequestError)
async def payment_request_error_handler(request: Request, exc: PaymentRequestError):
    logger.info(f"{request.method} {request.url.path} -> {exc.kind}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(products_public.router, prefix="/products", tags=["Public Products"])
app.include_router(products_admin.router, prefix="/admin/products", tags=["Admin Products"])
app.include_router(payment_requests.router, prefix="/payment-requests", tags=["Payment Requests"])
app.include_router(admin_payment_requests.router, prefix="/admin/payment-requests", tags=["Admin Payment Requests"])
app.include_router(refund_requests.router, prefix="/refund-requests", tags=["Refund Requests"])
app.include_router(admin_refund_requests.router, prefix="/admin/refund-requests", tags=["Admin Refund Requests"])
app.include_router(contact_requests.router, prefix="/contact-requests", tags=["Contact Requests"])
app.include_router(admin_contact_requests.router, prefix="/admin/contact-requests", tags=["Admin Contact Requests"])
app.include_router(admin_users.router, prefix="/admin/users", tags=["Admin Users"])
app.include_router(admin_analytics.router, prefix="/admin", tags=["Admin Analytics"])
app.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
app.include_router(user_library.router, prefix="/library", tags=["Library"])


@app.get("/")
def root():
    return {
        "product_endpoints": [
            "/products", "/products/{product_id}"
        ],
        "purchase_endpoints": [
            "/payment-requests", "/payment-requests/me",
            "/refund-requests", "/refund-requests/me"
        ],
        "contact_endpoints": [
            "/contact-requests"
        ],
        "library_endpoints": [
            "/library", "/library/products/{product_id}/download"
        ],
        "notification_endpoints": [
            "/notifications", "/notifications/unread-count",
            "/notifications/{notification_id}/read", "/notifications/read-all"
        ],
        "admin_endpoints": [
            "/admin/products", "/admin/payment-requests",
            "/admin/payment-requests/{request_id}/approve",
            "/admin/payment-requests/{request_id}/reject",
            "/admin/payment-requests/{request_id}/revoke",
            "/admin/payment-requests/{request_id}/re-approve",
            "/admin/payment-requests/{request_id}/reset",
            "/admin/refund-requests",
            "/admin/refund-requests/{refund_id}/approve",
            "/admin/refund-requests/{refund_id}/reject",
            "/admin/contact-requests",
            "/admin/contact-requests/{contact_id}/status",
            "/admin/users", "/admin/users/{user_id}/role",
            "/admin/stats"
        ]
    }
