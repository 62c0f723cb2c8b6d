from pydantic import BaseModel, Field
from typing import List, Optional
import datetime

from .enums import Language


class CategoryTranslationIn(BaseModel):
    language: Language
    name: str


class CategoryTranslation(CategoryTranslationIn):
    id: int

    class Config:
        from_attributes = True


class CategoryCreate(BaseModel):
    slug: str
    translations: List[CategoryTranslationIn] = Field(..., min_length=1)


class CategoryUpdate(BaseModel):
    slug: Optional[str] = None
    translations: Optional[List[CategoryTranslationIn]] = Field(None, min_length=1)


class Category(BaseModel):
    id: int
    slug: str
    created_at: datetime.datetime
    translations: List[CategoryTranslation] = []

    class Config:
        from_attributes = True


class CategoryWithCount(Category):
    product_count: int = 0


class ProductTranslationIn(BaseModel):
    language: Language
    name: str
    description: Optional[str] = None
    meta_title: Optional[str] = None
    meta_desc: Optional[str] = None


class ProductTranslation(ProductTranslationIn):
    id: int

    class Config:
        from_attributes = True


class ProductCreate(BaseModel):
    slug: str
    price: int = Field(..., ge=0)
    compare_price: Optional[int] = Field(None, ge=0)
    stock: int = Field(0, ge=0)
    is_active: bool = True
    is_featured: bool = False
    images: List[str] = []
    category_ids: List[int] = []
    translations: List[ProductTranslationIn] = Field(..., min_length=1)


class ProductUpdate(BaseModel):
    """``translations`` and ``category_ids`` replace the current sets when given."""
    slug: Optional[str] = None
    price: Optional[int] = Field(None, ge=0)
    compare_price: Optional[int] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    images: Optional[List[str]] = None
    category_ids: Optional[List[int]] = None
    translations: Optional[List[ProductTranslationIn]] = Field(None, min_length=1)


class Product(BaseModel):
    id: int
    slug: str
    price: int
    compare_price: Optional[int] = None
    stock: int
    is_active: bool
    is_featured: bool
    images: Optional[List[str]] = None
    created_at: datetime.datetime
    translations: List[ProductTranslation] = []
    categories: List[Category] = []

    class Config:
        from_attributes = True


class ProductFilter(BaseModel):
    search: Optional[str] = None  # matched against translated names
    category_id: Optional[int] = None
    is_active: Optional[bool] = None
