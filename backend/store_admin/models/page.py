"""
Páginas de contenido (About, políticas, etc.)
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from store_admin.core.database import Base
from store_admin.models.common import new_id, utcnow


class Page(Base):
    __tablename__ = "pages"
    __table_args__ = (UniqueConstraint("store_id", "slug", name="uq_pages_store_slug"),)

    id = Column(String(36), primary_key=True, default=new_id)
    store_id = Column(String(36), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False)
    content = Column(Text)
    meta_title = Column(String(255))
    meta_description = Column(Text)
    is_published = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    store = relationship("Store", back_populates="pages")
    translations = relationship("PageTranslation", back_populates="page", cascade="all, delete-orphan")


class PageTranslation(Base):
    """
    Page translations keep SEO fields as seo_title / seo_description
    """
    __tablename__ = "page_translations"
    __table_args__ = (UniqueConstraint("page_id", "language", name="uq_page_translations_lang"),)

    id = Column(String(36), primary_key=True, default=new_id)
    page_id = Column(String(36), ForeignKey("pages.id", ondelete="CASCADE"), nullable=False, index=True)
    language = Column(String(10), nullable=False)

    title = Column(String(255))
    content = Column(Text)
    seo_title = Column(String(255))
    seo_description = Column(Text)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    page = relationship("Page", back_populates="translations")
