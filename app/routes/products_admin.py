from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from app.database import get_session
from app.models.payment_request import PaymentRequest
from app.models.product import Product
from app.models.user import User
from app.schemas.product_schemas import ProductCreate, ProductUpdate
from app.utils.cache_helpers import clear_product_caches, product_to_dict
from app.utils.pagination import paginate
from app.utils.token import get_current_admin

router = APIRouter()


def _admin_product(product: Product) -> dict:
    data = product_to_dict(product)
    data["download_url"] = product.download_url
    data["updated_at"] = product.updated_at
    return data


@router.get("/list")
def list_admin_products(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str | None = None,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    query = select(Product)

    if search:
        query = query.where(Product.title.ilike(f"%{search}%"))

    query = query.order_by(Product.updated_at.desc())

    return paginate(
        session=session,
        query=query,
        page=page,
        limit=limit,
        serialize=_admin_product,
    )


@router.post("", status_code=201)
def create_product(
    data: ProductCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    product = Product(**data.model_dump())

    session.add(product)
    session.commit()
    session.refresh(product)

    clear_product_caches()
    return _admin_product(product)


@router.put("/{product_id}")
def update_product(
    product_id: int,
    data: ProductUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(404, "Product not found")

    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(product, key, value)
    product.updated_at = datetime.utcnow()

    session.add(product)
    session.commit()
    session.refresh(product)

    clear_product_caches()
    return _admin_product(product)


@router.patch("/{product_id}/toggle")
def toggle_product(
    product_id: int,
    enabled: bool = Query(...),
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(404, "Product not found")

    product.is_active = enabled
    product.updated_at = datetime.utcnow()

    session.add(product)
    session.commit()

    clear_product_caches()
    return {
        "message": f"Product {'enabled' if enabled else 'disabled'}",
        "product_id": product.id,
        "is_active": product.is_active
    }


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(404, "Product not found")

    in_use = session.exec(
        select(PaymentRequest.id).where(PaymentRequest.product_id == product_id)
    ).first()
    if in_use:
        raise HTTPException(
            400,
            "Product has payment requests, disable it instead"
        )

    session.delete(product)
    session.commit()

    clear_product_caches()
    return {"message": "Product deleted", "product_id": product_id}
