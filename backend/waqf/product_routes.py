"""
Shop catalog: products and their categories.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload
from typing import List, Optional
from . import product_models, product_schemas
from .database import apply_changes, get_db
from .enums import Language
from .errors import Conflict, NotFound
from .paging import Page, contains_pattern, paginate
from .schemas import Message
from .security import require_admin
from .translations import create_with_translations, replace_translations, translations_option

router = APIRouter(prefix="/api/v1/products", tags=["shop"])

Product = product_models.Product
ProductTranslation = product_models.ProductTranslation
Category = product_models.Category
CategoryTranslation = product_models.CategoryTranslation
ProductCategory = product_models.ProductCategory


def product_query(db: Session, lang: Optional[Language] = None):
    # category names always come with every language
    return db.query(Product).options(
        translations_option(Product, ProductTranslation, lang),
        selectinload(Product.categories).selectinload(Category.translations),
    ).execution_options(populate_existing=True)


def apply_product_filter(query, filters: product_schemas.ProductFilter):
    if filters.is_active is not None:
        query = query.filter(Product.is_active == filters.is_active)
    if filters.category_id is not None:
        query = query.filter(Product.categories.any(Category.id == filters.category_id))
    if filters.search:
        pattern = contains_pattern(filters.search)
        query = query.filter(Product.translations.any(ProductTranslation.name.ilike(pattern, escape='\\')))
    return query


def load_categories(db: Session, category_ids: List[int]) -> List[Category]:
    wanted = set(category_ids)
    categories = db.query(Category).filter(Category.id.in_(wanted)).all() if wanted else []
    missing = wanted - {c.id for c in categories}
    if missing:
        raise NotFound(f"Category(ies) not found: {', '.join(str(i) for i in sorted(missing))}")
    return categories


def ensure_slug_free(db: Session, model, slug: str, exclude_id: Optional[int] = None):
    q = db.query(model.id).filter(model.slug == slug)
    if exclude_id is not None:
        q = q.filter(model.id != exclude_id)
    if q.first():
        raise Conflict('Slug already exists')


# ===== CATEGORIES =====

def category_with_count(db: Session, category: Category) -> product_schemas.CategoryWithCount:
    count = db.query(ProductCategory).filter(ProductCategory.category_id == category.id).count()
    item = product_schemas.CategoryWithCount.model_validate(category)
    item.product_count = count
    return item


@router.get("/categories", response_model=List[product_schemas.CategoryWithCount])
def list_categories(lang: Optional[Language] = None, db: Session = Depends(get_db)):
    categories = db.query(Category).options(
        translations_option(Category, CategoryTranslation, lang)
    ).execution_options(populate_existing=True).order_by(Category.created_at.asc(), Category.id.asc()).all()
    counts = dict(
        db.query(ProductCategory.category_id, func.count(ProductCategory.product_id))
        .group_by(ProductCategory.category_id).all()
    )
    result = []
    for category in categories:
        item = product_schemas.CategoryWithCount.model_validate(category)
        item.product_count = counts.get(category.id, 0)
        result.append(item)
    return result


@router.post("/categories", response_model=product_schemas.CategoryWithCount, dependencies=[Depends(require_admin)])
def create_category(payload: product_schemas.CategoryCreate, db: Session = Depends(get_db)):
    ensure_slug_free(db, Category, payload.slug)
    category = Category(slug=payload.slug)
    create_with_translations(db, category, CategoryTranslation, payload.translations)
    db.commit()
    db.refresh(category)
    return category_with_count(db, category)


@router.put("/categories/{category_id}", response_model=product_schemas.CategoryWithCount,
            dependencies=[Depends(require_admin)])
def update_category(category_id: int, payload: product_schemas.CategoryUpdate, db: Session = Depends(get_db)):
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFound('Category not found')
    if payload.slug is not None:
        ensure_slug_free(db, Category, payload.slug, exclude_id=category_id)
        category.slug = payload.slug
    if payload.translations is not None:
        replace_translations(db, category, CategoryTranslation, payload.translations)
    db.commit()
    db.refresh(category)
    return category_with_count(db, category)


@router.delete("/categories/{category_id}", response_model=Message, dependencies=[Depends(require_admin)])
def delete_category(category_id: int, db: Session = Depends(get_db)):
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFound('Category not found')
    db.delete(category)
    db.commit()
    return {"message": "Category deleted"}


# ===== PRODUCTS =====

@router.post("", response_model=product_schemas.Product, dependencies=[Depends(require_admin)])
def create_product(payload: product_schemas.ProductCreate, db: Session = Depends(get_db)):
    ensure_slug_free(db, Product, payload.slug)
    product = Product(**payload.model_dump(exclude={'translations', 'category_ids'}))
    product.categories = load_categories(db, payload.category_ids)
    create_with_translations(db, product, ProductTranslation, payload.translations)
    db.commit()
    return product_query(db).filter(Product.id == product.id).first()


@router.get("", response_model=Page[product_schemas.Product])
def list_products(
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    is_active: Optional[bool] = None,
    lang: Optional[Language] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    db: Session = Depends(get_db)
):
    filters = product_schemas.ProductFilter(search=search, category_id=category_id, is_active=is_active)
    q = apply_product_filter(product_query(db, lang), filters).order_by(Product.created_at.desc(), Product.id.desc())
    return paginate(q, page, limit)


@router.get("/slug/{slug}", response_model=product_schemas.Product)
def get_product_by_slug(slug: str, lang: Optional[Language] = None, db: Session = Depends(get_db)):
    product = product_query(db, lang).filter(Product.slug == slug).first()
    if not product:
        raise NotFound('Product not found')
    return product


@router.get("/{product_id}", response_model=product_schemas.Product)
def get_product(product_id: int, lang: Optional[Language] = None, db: Session = Depends(get_db)):
    product = product_query(db, lang).filter(Product.id == product_id).first()
    if not product:
        raise NotFound('Product not found')
    return product


@router.put("/{product_id}", response_model=product_schemas.Product, dependencies=[Depends(require_admin)])
def update_product(product_id: int, payload: product_schemas.ProductUpdate, db: Session = Depends(get_db)):
    """Price changes here never touch existing orders, they keep their snapshot."""
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFound('Product not found')
    if payload.slug is not None:
        ensure_slug_free(db, Product, payload.slug, exclude_id=product_id)

    changes = payload.model_dump(exclude_unset=True, exclude={'translations', 'category_ids'})
    apply_changes(product, changes, nullable=('compare_price', 'images'))
    if payload.category_ids is not None:
        product.categories = load_categories(db, payload.category_ids)
    if payload.translations is not None:
        replace_translations(db, product, ProductTranslation, payload.translations)
    db.commit()
    return product_query(db).filter(Product.id == product_id).first()


@router.delete("/{product_id}", response_model=Message, dependencies=[Depends(require_admin)])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFound('Product not found')
    db.delete(product)
    db.commit()
    return {"message": "Product deleted"}
