from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from app.database import get_session
from app.models.product import Product
from app.models.user import User
from app.models.user_product_access import UserProductAccess
from app.services.access_grant_service import has_access
from app.utils.token import get_current_user

router = APIRouter()


@router.get("")
def my_library(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    rows = session.exec(
        select(UserProductAccess, Product)
        .join(Product, Product.id == UserProductAccess.product_id)
        .where(UserProductAccess.user_id == current_user.id)
        .order_by(UserProductAccess.granted_at.desc())
    ).all()

    return [
        {
            "product_id": p.id,
            "title": p.title,
            "category": p.category,
            "image_url": p.image_url,
            "granted_at": a.granted_at,
        }
        for a, p in rows
    ]


@router.get("/products/{product_id}/download")
def download_product(
    product_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    if not has_access(session, current_user.id, product_id):
        raise HTTPException(403, "You do not own this product")

    product = session.get(Product, product_id)
    if not product or not product.download_url:
        raise HTTPException(404, "Download not available")

    return {
        "product_id": product.id,
        "title": product.title,
        "download_url": product.download_url,
    }
