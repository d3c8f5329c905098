from typing import Optional
from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = ""
    category: Optional[str] = None
    price: float = Field(ge=0)
    price_pkr: Optional[float] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    download_url: Optional[str] = None
    is_active: bool = True


class ProductUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    price_pkr: Optional[float] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    download_url: Optional[str] = None
    is_active: Optional[bool] = None
