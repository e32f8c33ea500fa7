"""
Modelos del catálogo: categorías, productos, variantes y traducciones
"""
from sqlalchemy import (
    DECIMAL,
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from store_admin.core.database import Base
from store_admin.models.common import new_id, utcnow


class Category(Base):
    """
    Categorías de productos

    type = manual     -> products are assigned explicitly
    type = automatic  -> membership follows `conditions` ({"groups": [...]})
    """
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("store_id", "slug", name="uq_categories_store_slug"),)

    id = Column(String(36), primary_key=True, default=new_id)
    store_id = Column(String(36), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False)
    description = Column(Text)
    image = Column(String(500))
    type = Column(String(20), default="manual")
    sort_order = Column(Integer, default=0)
    conditions = Column(JSON)
    is_active = Column(Boolean, default=True)

    # SEO
    seo_title = Column(String(255))
    seo_description = Column(Text)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    store = relationship("Store", back_populates="categories")
    products = relationship("Product", back_populates="category")
    translations = relationship("CategoryTranslation", back_populates="category", cascade="all, delete-orphan")


class Product(Base):
    """
    Productos de la tienda. Precio y stock viven en las variantes.
    """
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_id)
    store_id = Column(String(36), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), index=True)

    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, index=True)
    description = Column(Text)
    product_type = Column(String(20), default="physical")
    is_active = Column(Boolean, default=True, index=True)
    images = Column(JSON, default=list)
    tags = Column(JSON, default=list)

    # SEO
    meta_title = Column(String(255))
    meta_description = Column(Text)

    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    store = relationship("Store", back_populates="products")
    category = relationship("Category", back_populates="products")
    variants = relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductVariant.position",
    )
    translations = relationship("ProductTranslation", back_populates="product", cascade="all, delete-orphan")


class ProductVariant(Base):
    __tablename__ = "product_variants"

    id = Column(String(36), primary_key=True, default=new_id)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False, default="Default")
    price = Column(DECIMAL(12, 2), nullable=False, default=0)
    compare_at_price = Column(DECIMAL(12, 2))
    sku = Column(String(100), index=True)
    stock = Column(Integer, default=0)
    options = Column(JSON, default=dict)
    position = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    product = relationship("Product", back_populates="variants")


class ProductTranslation(Base):
    __tablename__ = "product_translations"
    __table_args__ = (UniqueConstraint("product_id", "language", name="uq_product_translations_lang"),)

    id = Column(String(36), primary_key=True, default=new_id)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    language = Column(String(10), nullable=False)

    name = Column(String(255))
    description = Column(Text)
    meta_title = Column(String(255))
    meta_description = Column(Text)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    product = relationship("Product", back_populates="translations")


class CategoryTranslation(Base):
    __tablename__ = "category_translations"
    __table_args__ = (UniqueConstraint("category_id", "language", name="uq_category_translations_lang"),)

    id = Column(String(36), primary_key=True, default=new_id)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)
    language = Column(String(10), nullable=False)

    name = Column(String(255))
    description = Column(Text)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    category = relationship("Category", back_populates="translations")
