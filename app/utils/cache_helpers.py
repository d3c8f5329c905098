from functools import lru_cache
import time
from sqlmodel import Session, select
from app.models.product import Product
from app.utils.pagination import paginate

CACHE_TTL = 60 * 60  # 60 minutes

def _ttl_bucket():
    return int(time.time() // CACHE_TTL)


def product_to_dict(product: Product) -> dict:
    return {
        "product_id": product.id,
        "title": product.title,
        "description": product.description,
        "category": product.category,
        "price": product.price,
        "price_pkr": product.price_pkr,
        "image_url": product.image_url,
        "is_active": product.is_active,
        "created_at": product.created_at,
    }


@lru_cache(maxsize=128)
def cached_active_products(page: int, limit: int, bucket: int):
    from app.database import engine

    with Session(engine) as session:
        query = (
            select(Product)
            .where(Product.is_active == True)
            .order_by(Product.created_at.desc())
        )
        return paginate(
            session=session,
            query=query,
            page=page,
            limit=limit,
            serialize=product_to_dict,
        )


def clear_product_caches():
    cached_active_products.cache_clear()
