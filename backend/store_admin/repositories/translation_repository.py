"""
Translation Repository - translatable content and its per-language rows

Products, categories and pages each have a translation table keyed by
(owner id, language). Saving is an upsert on that key.
"""
from typing import Dict, List, Set

from sqlalchemy.orm import Session

from store_admin.models import (
    Category,
    CategoryTranslation,
    Page,
    PageTranslation,
    Product,
    ProductTranslation,
)

CONTENT_MODELS = {
    "product": Product,
    "category": Category,
    "page": Page,
}

TRANSLATION_MODELS = {
    "product": (ProductTranslation, "product_id"),
    "category": (CategoryTranslation, "category_id"),
    "page": (PageTranslation, "page_id"),
}


class TranslationRepository:

    def __init__(self, db: Session):
        self.db = db

    def find_content(self, content_type: str, store_id: str, content_id: str):
        model = CONTENT_MODELS[content_type]
        return (
            self.db.query(model)
            .filter(model.store_id == store_id, model.id == content_id)
            .first()
        )

    def find_newest_content(self, content_type: str, store_id: str, limit: int) -> List:
        model = CONTENT_MODELS[content_type]
        return (
            self.db.query(model)
            .filter(model.store_id == store_id)
            .order_by(model.created_at.desc())
            .limit(limit)
            .all()
        )

    def translated_product_ids(self, store_id: str, language: str) -> Set[str]:
        rows = (
            self.db.query(ProductTranslation.product_id)
            .join(Product, Product.id == ProductTranslation.product_id)
            .filter(Product.store_id == store_id, ProductTranslation.language == language)
            .all()
        )
        return {row.product_id for row in rows}

    def find_translation(self, content_type: str, content_id: str, language: str):
        model, owner_column = TRANSLATION_MODELS[content_type]
        return (
            self.db.query(model)
            .filter(getattr(model, owner_column) == content_id, model.language == language)
            .first()
        )

    def upsert(self, content_type: str, content_id: str, language: str, values: Dict):
        """
        Create or update the translation row for (content_id, language)

        Returns:
            The saved translation row
        """
        model, owner_column = TRANSLATION_MODELS[content_type]
        translation = self.find_translation(content_type, content_id, language)

        if translation is None:
            translation = model(**{owner_column: content_id, "language": language}, **values)
            self.db.add(translation)
        else:
            for key, value in values.items():
                setattr(translation, key, value)

        self.db.commit()
        self.db.refresh(translation)
        return translation
