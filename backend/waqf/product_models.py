from sqlalchemy import (
    Boolean, Column, DateTime, Enum, ForeignKey, Integer, JSON, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from .database import Base
from .enums import Language
import datetime


class Product(Base):
    __tablename__ = 'products'

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    price = Column(Integer, nullable=False)  # XOF
    compare_price = Column(Integer, nullable=True)  # crossed-out price shown as discount
    # not decremented by orders
    stock = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True, index=True)
    is_featured = Column(Boolean, default=False)
    images = Column(JSON, nullable=True)  # ordered list of URLs

    created_at = Column(DateTime, default=datetime.datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    translations = relationship(
        'ProductTranslation', back_populates='product',
        cascade='all, delete-orphan', order_by='ProductTranslation.id',
    )
    categories = relationship(
        'Category', secondary='product_categories', back_populates='products', order_by='Category.id',
    )
    # deleting a product detaches past order lines instead of leaving a dangling id
    order_items = relationship('OrderItem', back_populates='product')


class ProductTranslation(Base):
    __tablename__ = 'product_translations'
    __table_args__ = (
        UniqueConstraint('product_id', 'language', name='uq_product_translation_language'),
    )

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True)
    language = Column(Enum(Language), nullable=False)
    name = Column(String(300), nullable=False, index=True)
    description = Column(Text, nullable=True)
    meta_title = Column(String(300), nullable=True)
    meta_desc = Column(String(500), nullable=True)

    product = relationship('Product', back_populates='translations')


class Category(Base):
    __tablename__ = 'categories'

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    translations = relationship(
        'CategoryTranslation', back_populates='category',
        cascade='all, delete-orphan', order_by='CategoryTranslation.id',
    )
    products = relationship('Product', secondary='product_categories', back_populates='categories')


class CategoryTranslation(Base):
    __tablename__ = 'category_translations'
    __table_args__ = (
        UniqueConstraint('category_id', 'language', name='uq_category_translation_language'),
    )

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey('categories.id', ondelete='CASCADE'), nullable=False, index=True)
    language = Column(Enum(Language), nullable=False)
    name = Column(String(200), nullable=False)

    category = relationship('Category', back_populates='translations')


class ProductCategory(Base):
    __tablename__ = 'product_categories'

    product_id = Column(Integer, ForeignKey('products.id', ondelete='CASCADE'), primary_key=True)
    category_id = Column(Integer, ForeignKey('categories.id', ondelete='CASCADE'), primary_key=True)
