"""
AI Actions Service

Store operations the dashboard assistant can trigger by name. Every action
receives the owned store and a loose `data` dict and returns (data, message).
Failures are wrapped as "Failed to <verb>: <reason>".

Actions:
- create_product / update_product
- create_discount / create_campaign
- update_settings
- analyze_store
- generate_content (internal call to /api/ai/generate)
- bulk_update_products / export_products
- translate_content / batch_translate (internal calls to /api/ai/translate)
"""
import logging
import random
import time
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Tuple

from pydantic.alias_generators import to_snake
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from store_admin.domain.base import json_safe
from store_admin.domain.marketing import Campaign, CampaignInput, Discount, DiscountInput
from store_admin.domain.product import Product as ProductSchema
from store_admin.models import Store
from store_admin.repositories import (
    CategoryRepository,
    MarketingRepository,
    ProductRepository,
    StoreRepository,
    TranslationRepository,
)
from store_admin.services.export_service import products_to_csv
from store_admin.services.internal_api_client import InternalApiClient
from store_admin.services.product_service import ProductService
from store_admin.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

# ============================================================================
# CONFIGURATION
# ============================================================================

ACTION_VERBS = {
    "create_product": "create product",
    "update_product": "update product",
    "create_discount": "create discount",
    "update_settings": "update settings",
    "create_campaign": "create campaign",
    "analyze_store": "analyze store",
    "generate_content": "generate content",
    "bulk_update_products": "bulk update products",
    "export_products": "export products",
    "translate_content": "translate content",
    "batch_translate": "batch translate",
}

ACTIONS_MANIFEST = [
    {
        "action": "create_product",
        "description": "Create a new product with AI-generated content",
        "requiredFields": ["name"],
        "optionalFields": ["description", "price", "compareAtPrice", "sku", "stock", "images", "tags", "categoryId"],
    },
    {
        "action": "update_product",
        "description": "Update an existing product",
        "requiredFields": ["productId"],
        "optionalFields": ["name", "description", "price", "compareAtPrice", "isActive", "images", "tags"],
    },
    {
        "action": "create_discount",
        "description": "Create a discount code",
        "requiredFields": [],
        "optionalFields": ["code", "type", "value", "minPurchase", "usageLimit", "expiresAt"],
    },
    {
        "action": "update_settings",
        "description": "Update store settings",
        "requiredFields": [],
        "optionalFields": ["storeName", "currency", "timezone", "taxRate", "shippingRate"],
    },
    {
        "action": "create_campaign",
        "description": "Create a marketing campaign",
        "requiredFields": ["name", "content"],
        "optionalFields": ["type", "subject", "targetAudience", "scheduledFor"],
    },
    {
        "action": "analyze_store",
        "description": "Get comprehensive store analysis",
        "requiredFields": [],
        "optionalFields": [],
    },
    {
        "action": "generate_content",
        "description": "Generate various content types",
        "requiredFields": ["contentType", "context"],
        "optionalFields": [],
    },
    {
        "action": "bulk_update_products",
        "description": "Bulk update multiple products",
        "requiredFields": ["operation"],
        "optionalFields": ["filters", "updates"],
    },
    {
        "action": "export_products",
        "description": "Export all products as JSON or CSV",
        "requiredFields": [],
        "optionalFields": ["format"],
    },
    {
        "action": "translate_content",
        "description": "Translate a product, category or page and save the translation",
        "requiredFields": ["contentType", "contentId"],
        "optionalFields": ["targetLanguage", "sourceLanguage"],
    },
    {
        "action": "batch_translate",
        "description": "Translate the newest products, categories or pages",
        "requiredFields": ["contentType"],
        "optionalFields": ["targetLanguage", "sourceLanguage", "limit", "filter"],
    },
]

# camelCase source fields sent for translation, per content type
TRANSLATABLE_FIELDS = {
    "product": ["name", "description", "metaTitle", "metaDescription"],
    "category": ["name", "description"],
    "page": ["title", "content", "metaTitle", "metaDescription"],
}

LOW_STOCK_THRESHOLD = 5
LOW_STOCK_LIMIT = 5
ANALYSIS_WINDOW_DAYS = 30
RECENT_PRODUCT_DAYS = 7
CENTS = Decimal("0.01")


class UnknownActionError(Exception):
    """The requested action name is not registered"""


class ActionFailedError(Exception):
    """An action raised; message is "Failed to <verb>: <reason>" """


# ============================================================================
# Helpers
# ============================================================================

def apply_price_change(price, change_type: str, value) -> Decimal:
    """
    New variant price for a bulk price change

    percentage: price * (1 + value / 100)
    fixed:      price + value
    The result is clamped at 0 and rounded to cents.
    """
    price = Decimal(str(price or 0))
    value = Decimal(str(value))
    if change_type == "percentage":
        new_price = price * (1 + value / 100)
    else:
        new_price = price + value
    return max(Decimal("0"), new_price).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_amount(value) -> str:
    """10 -> "10", 12.50 -> "12.5" """
    normalized = Decimal(str(value)).normalize()
    return format(normalized, "f")


def epoch_millis() -> int:
    return int(time.time() * 1000)


def _present(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop empty values so schema defaults apply"""
    return {key: value for key, value in data.items() if value is not None and value != ""}


def translation_values(content_type: str, content, translated: Dict[str, str]) -> Dict[str, Any]:
    """
    Columns of the translation row for a content item

    Missing titles/names fall back to the source text.
    """
    if content_type == "product":
        return {
            "name": translated.get("name") or content.name,
            "description": translated.get("description"),
            "meta_title": translated.get("metaTitle"),
            "meta_description": translated.get("metaDescription"),
        }
    if content_type == "category":
        return {
            "name": translated.get("name") or content.name,
            "description": translated.get("description"),
        }
    return {
        "title": translated.get("title") or content.title,
        "content": translated.get("content") or content.content,
        "seo_title": translated.get("metaTitle"),
        "seo_description": translated.get("metaDescription"),
    }


def texts_to_translate(content_type: str, content) -> List[Dict[str, str]]:
    texts = []
    for field in TRANSLATABLE_FIELDS[content_type]:
        value = getattr(content, to_snake(field), None)
        if value:
            texts.append({"field": field, "text": value})
    return texts


def _display_name(item) -> Optional[str]:
    return getattr(item, "name", None) or getattr(item, "title", None)


# ============================================================================
# MAIN SERVICE CLASS
# ============================================================================

class AIActionsService:
    """
    Executes assistant actions against one owned store
    """

    def __init__(self, db: Session, store: Store, client: InternalApiClient):
        self.db = db
        self.store = store
        self.client = client

        self.products = ProductRepository(db)
        self.categories = CategoryRepository(db)
        self.marketing = MarketingRepository(db)
        self.stores = StoreRepository(db)
        self.translations = TranslationRepository(db)

        self._handlers = {
            "create_product": self.create_product,
            "update_product": self.update_product,
            "create_discount": self.create_discount,
            "update_settings": self.update_settings,
            "create_campaign": self.create_campaign,
            "analyze_store": self.analyze_store,
            "generate_content": self.generate_content,
            "bulk_update_products": self.bulk_update_products,
            "export_products": self.export_products,
            "translate_content": self.translate_content,
            "batch_translate": self.batch_translate,
        }

    async def execute(self, action: str, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Run an action

        Returns:
            {"success": True, "action": ..., "data": ..., "message": ...}

        Raises:
            UnknownActionError: action is not registered
            ActionFailedError: the action raised
        """
        handler = self._handlers.get(action)
        if handler is None:
            raise UnknownActionError(action)

        try:
            result, message = await handler(data or {})
        except Exception as e:
            self.db.rollback()
            logger.error(f"Action {action} failed for store {self.store.subdomain}: {e}", exc_info=True)
            raise ActionFailedError(f"Failed to {ACTION_VERBS[action]}: {e}") from e

        logger.info(f"Action {action} completed for store {self.store.subdomain}")
        return {
            "success": True,
            "action": action,
            "data": json_safe(result),
            "message": message,
        }

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    async def create_product(self, data: Dict[str, Any]) -> Tuple[Any, str]:
        product = ProductService(self.db).create_from_action(self.store.id, data)
        return ProductSchema.model_validate(product).to_dict(), f'Product "{product.name}" created successfully!'

    async def update_product(self, data: Dict[str, Any]) -> Tuple[Any, str]:
        product = ProductService(self.db).update_from_action(self.store.id, data)
        return ProductSchema.model_validate(product).to_dict(), f'Product "{product.name}" updated successfully!'

    async def bulk_update_products(self, data: Dict[str, Any]) -> Tuple[Any, str]:
        """
        Filters: categoryId, categoryName, isActive, outOfStock, recent, tags
        Operations: price_change, activate, deactivate, add_tag, remove_tag
        """
        operation = data.get("operation")
        filters = data.get("filters") or {}
        updates = data.get("updates") or {}

        if operation not in ("price_change", "activate", "deactivate", "add_tag", "remove_tag"):
            raise ValueError(f"Unknown bulk operation: {operation}")

        category_id = filters.get("categoryId")
        if filters.get("categoryName"):
            category = self.categories.find_by_name_contains(self.store.id, filters["categoryName"])
            if category is None:
                raise LookupError(f"No category matching \"{filters['categoryName']}\"")
            category_id = category.id

        products = self.products.find_matching(
            self.store.id,
            category_id=category_id,
            is_active=filters.get("isActive"),
            out_of_stock=bool(filters.get("outOfStock")),
            created_since=(
                datetime.now(timezone.utc) - timedelta(days=RECENT_PRODUCT_DAYS)
                if filters.get("recent") else None
            ),
            tags=filters.get("tags") or None,
        )

        if operation == "price_change":
            if updates.get("value") is None:
                raise ValueError("updates.value is required for price_change")
            variant_count = 0
            for product in products:
                for variant in product.variants:
                    variant.price = apply_price_change(variant.price, updates.get("changeType"), updates["value"])
                    variant_count += 1
            result = {"updated": variant_count, "products": len(products)}

        elif operation in ("activate", "deactivate"):
            for product in products:
                product.is_active = operation == "activate"
            result = {"updated": len(products)}

        else:
            tag = updates.get("tag")
            if not tag:
                raise ValueError(f"updates.tag is required for {operation}")
            for product in products:
                current = list(product.tags or [])
                if operation == "add_tag":
                    product.tags = current if tag in current else current + [tag]
                else:
                    product.tags = [t for t in current if t != tag]
            result = {"updated": len(products)}

        self.db.commit()

        if "products" in result:
            summary = f"{result['updated']} variants in {result['products']} products"
        else:
            summary = f"{result['updated']} products"
        return result, f"Bulk update completed! {summary} updated."

    async def export_products(self, data: Dict[str, Any]) -> Tuple[Any, str]:
        export_format = "csv" if data.get("format") == "csv" else "json"
        products = [ProductSchema.model_validate(p) for p in self.products.find_all_for_export(self.store.id)]

        if export_format == "csv":
            content: Any = products_to_csv(products)
        else:
            content = [p.to_dict() for p in products]

        result = {
            "format": export_format,
            "content": content,
            "filename": f"products-{epoch_millis()}.{export_format}",
        }
        return result, f"Exported {len(products)} products to {export_format.upper()} format"

    # ------------------------------------------------------------------
    # Marketing
    # ------------------------------------------------------------------

    async def create_discount(self, data: Dict[str, Any]) -> Tuple[Any, str]:
        payload = DiscountInput.model_validate(_present(data))
        code = payload.code or f"SAVE{random.randint(0, 999)}"
        if self.marketing.discount_code_exists(self.store.id, code):
            raise ValueError(f'Discount code "{code}" already exists')

        discount = self.marketing.create_discount(self.store.id, {
            "code": code,
            "type": payload.type,
            "value": payload.value,
            "min_purchase": payload.min_purchase,
            "usage_limit": payload.usage_limit,
            "expires_at": payload.expires_at,
            "is_active": True,
        })

        unit = "%" if discount.type == "percentage" else "$"
        message = f'Discount code "{discount.code}" created! {format_amount(discount.value)}{unit} off'
        return Discount.model_validate(discount).to_dict(), message

    async def create_campaign(self, data: Dict[str, Any]) -> Tuple[Any, str]:
        payload = CampaignInput.model_validate(_present(data))
        campaign = self.marketing.create_campaign(self.store.id, {
            "name": payload.name,
            "type": payload.type,
            "status": "draft",
            "subject": payload.subject,
            "content": payload.content,
            "target_audience": payload.target_audience,
            "scheduled_for": payload.scheduled_for,
        })
        return Campaign.model_validate(campaign).to_dict(), f'Marketing campaign "{campaign.name}" created successfully!'

    async def generate_content(self, data: Dict[str, Any]) -> Tuple[Any, str]:
        content_type = data.get("contentType")
        context = data.get("context") or {}

        response = await self.client.generate(
            task=content_type or "general",
            prompt=context.get("prompt") or "",
            data=context,
        )
        content = (response.get("data") or {}).get("result") or response.get("result")
        return {"type": content_type, "content": content}, f"{content_type} content generated successfully!"

    # ------------------------------------------------------------------
    # Settings & analytics
    # ------------------------------------------------------------------

    async def update_settings(self, data: Dict[str, Any]) -> Tuple[Any, str]:
        applied = SettingsService(self.db).apply_action_updates(self.store, data)
        return applied, f"Store settings updated successfully! Updated: {', '.join(applied.keys())}"

    async def analyze_store(self, data: Dict[str, Any]) -> Tuple[Any, str]:
        since = datetime.now(timezone.utc) - timedelta(days=ANALYSIS_WINDOW_DAYS)
        stats = self.stores.get_stats(self.store.id, since)
        recent_orders = stats["recent_orders"]

        revenue = sum((Decimal(str(o["total"] or 0)) for o in recent_orders), Decimal("0"))
        completed = sum(1 for o in recent_orders if o["status"] == "completed")
        total_orders = stats["orders"]
        conversion_rate = round(completed / total_orders * 100, 2) if total_orders else 0

        low_stock = self.products.find_low_stock_variants(
            self.store.id, threshold=LOW_STOCK_THRESHOLD, limit=LOW_STOCK_LIMIT
        )

        recommendations = []
        if stats["products"] < 10:
            recommendations.append("Add more products to your catalog")
        if stats["categories"] < 3:
            recommendations.append("Create more categories to organize products")
        if low_stock:
            recommendations.append("Restock low inventory items")
        if not revenue:
            recommendations.append("Launch a marketing campaign to drive sales")

        analysis = {
            "overview": {
                "totalProducts": stats["products"],
                "totalOrders": total_orders,
                "totalCustomers": stats["customers"],
                "totalCategories": stats["categories"],
            },
            "performance": {
                "last30DaysRevenue": revenue,
                "last30DaysOrders": len(recent_orders),
                "completedOrders": completed,
                "conversionRate": conversion_rate,
            },
            "alerts": {
                "lowStockProducts": [
                    {"product": v.product.name, "variant": v.name, "quantity": v.stock}
                    for v in low_stock
                ],
            },
            "recommendations": recommendations,
        }
        return analysis, "Store analysis completed successfully!"

    # ------------------------------------------------------------------
    # Translation
    # ------------------------------------------------------------------

    async def _translate_item(self, content_type: str, item, source: str, target: str) -> Optional[List[Dict]]:
        texts = texts_to_translate(content_type, item)
        if not texts:
            return None
        return await self.client.translate_batch(texts, source, target, content_type)

    async def translate_content(self, data: Dict[str, Any]) -> Tuple[Any, str]:
        content_type = data.get("contentType")
        content_id = data.get("contentId")
        target = data.get("targetLanguage") or "tr"
        source = data.get("sourceLanguage") or "en"

        if content_type not in TRANSLATABLE_FIELDS:
            raise ValueError(f"Unsupported content type: {content_type}")

        content = self.translations.find_content(content_type, self.store.id, content_id)
        if content is None:
            raise LookupError(f"{content_type} not found")

        translations = await self._translate_item(content_type, content, source, target)
        if translations is None:
            raise ValueError(f"{content_type} has no text to translate")

        translated = {t["field"]: t["translation"] for t in translations}
        self.translations.upsert(
            content_type, content.id, target, translation_values(content_type, content, translated)
        )

        result = {
            "contentType": content_type,
            "contentId": content_id,
            "targetLanguage": target,
            "translations": translated,
            "saved": True,
        }
        return result, f"{content_type} translated to {target.upper()} and saved successfully!"

    async def batch_translate(self, data: Dict[str, Any]) -> Tuple[Any, str]:
        """
        Translate up to `limit` newest items one after another

        A failing item is recorded in `errors` and the loop continues.
        """
        content_type = data.get("contentType")
        target = data.get("targetLanguage") or "tr"
        source = data.get("sourceLanguage") or "en"
        limit = int(data.get("limit") or 10)
        item_filter = data.get("filter") or {}

        if content_type not in TRANSLATABLE_FIELDS:
            raise ValueError(f"Unsupported content type: {content_type}")

        if content_type == "product":
            category_id = item_filter.get("categoryId")
            if item_filter.get("categoryName"):
                category = self.categories.find_by_name_contains(self.store.id, item_filter["categoryName"])
                if category is not None:
                    category_id = category.id
            exclude_ids = (
                self.translations.translated_product_ids(self.store.id, target)
                if item_filter.get("untranslated") else None
            )
            items = self.products.find_newest(self.store.id, limit, category_id=category_id, exclude_ids=exclude_ids)
        else:
            items = self.translations.find_newest_content(content_type, self.store.id, limit)

        if not items:
            return {"translated": 0, "saved": 0}, f"No {content_type}s found to translate"

        translated_count = 0
        saved_count = 0
        results = []
        errors = []

        for item in items:
            item_id, item_name = item.id, _display_name(item)
            try:
                translations = await self._translate_item(content_type, item, source, target)
                if translations is None:
                    continue

                translated = {t["field"]: t["translation"] for t in translations}
                saved = False
                try:
                    self.translations.upsert(
                        content_type, item_id, target, translation_values(content_type, item, translated)
                    )
                    saved = True
                    saved_count += 1
                except SQLAlchemyError as db_error:
                    self.db.rollback()
                    logger.error(f"Failed to save translation for {content_type} {item_id}: {db_error}")
                    errors.append({"itemId": item_id, "itemName": item_name, "error": str(db_error)})

                results.append({"id": item_id, "name": item_name, "translations": translations, "saved": saved})
                translated_count += 1
            except Exception as item_error:
                logger.error(f"Failed to translate {content_type} {item_id}: {item_error}")
                errors.append({"itemId": item_id, "itemName": item_name, "error": str(item_error)})

        result = {
            "contentType": content_type,
            "targetLanguage": target,
            "totalItems": len(items),
            "translatedCount": translated_count,
            "savedCount": saved_count,
            "results": results,
        }
        if errors:
            result["errors"] = errors

        message = (
            f"Successfully translated {translated_count} and saved {saved_count} out of "
            f"{len(items)} {content_type}s to {target.upper()}"
        )
        return result, message
