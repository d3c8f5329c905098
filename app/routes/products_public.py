from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from app.database import get_session
from app.models.product import Product
from app.utils.cache_helpers import _ttl_bucket, cached_active_products, product_to_dict
from app.utils.pagination import paginate

router = APIRouter()


@router.get("")
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    search: str | None = None,
    session: Session = Depends(get_session),
):
    # Cache ONLY when no search
    if not search:
        return cached_active_products(page, limit, _ttl_bucket())

    s = f"%{search}%"
    query = (
        select(Product)
        .where(Product.is_active == True)
        .where(
            Product.title.ilike(s) |
            Product.description.ilike(s) |
            Product.category.ilike(s)
        )
        .order_by(Product.created_at.desc())
    )

    return paginate(
        session=session,
        query=query,
        page=page,
        limit=limit,
        serialize=product_to_dict,
    )


@router.get("/{product_id}")
def get_product(
    product_id: int,
    session: Session = Depends(get_session),
):
    product = session.get(Product, product_id)

    if not product or not product.is_active:
        raise HTTPException(404, "Product not found")

    return product_to_dict(product)
