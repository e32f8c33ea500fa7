"""
Email Template Service

Templates are a list inside StoreSettings.email_settings["templates"]; the
whole email_settings blob is rewritten on every change.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from store_admin.domain.email_template import EmailTemplateInput, EmailTemplateUpdate
from store_admin.models import Store, StoreSettings
from store_admin.repositories import StoreRepository
from store_admin.services.email_templates import DEFAULT_TEMPLATES, get_default_template

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _templates_of(settings: Optional[StoreSettings]) -> List[Dict[str, Any]]:
    if settings is None:
        return []
    return list((settings.email_settings or {}).get("templates") or [])


def template_body_from_default(body: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge a library template into a POST body carrying `fromTemplate`

    Raises:
        ValueError: unknown library key
    """
    key = body.get("fromTemplate")
    if key not in DEFAULT_TEMPLATES:
        available = ", ".join(DEFAULT_TEMPLATES.keys())
        raise ValueError(f"Default template not found: {key}. Available templates: {available}")

    template = get_default_template(key)
    return {
        **body,
        "type": key,
        "name": template["name"],
        "subject": template["subject"],
        "htmlContent": template["htmlContent"],
        "textContent": template.get("textContent") or "",
        "variables": template["variables"],
        "enabled": True,
    }


class EmailTemplateService:

    def __init__(self, db: Session):
        self.db = db
        self.stores = StoreRepository(db)

    def _save(self, settings: StoreSettings, templates: List[Dict[str, Any]]) -> None:
        settings.email_settings = {**(settings.email_settings or {}), "templates": templates}
        self.db.commit()

    def list(self, store: Store, template_type: Optional[str] = None, enabled: Optional[bool] = None) -> Dict:
        templates = _templates_of(self.stores.get_settings(store.id))

        if template_type:
            templates = [t for t in templates if t.get("type") == template_type]
        if enabled is not None:
            templates = [t for t in templates if t.get("enabled") == enabled]

        return {"templates": templates, "defaultTemplates": list(DEFAULT_TEMPLATES.keys())}

    def create(self, store: Store, payload: EmailTemplateInput, created_by: Optional[str]) -> Dict[str, Any]:
        """
        Raises:
            ValueError: a non-custom template of the same type already exists
        """
        settings = self.stores.get_or_create_settings(store.id)
        templates = _templates_of(settings)

        if payload.type != "custom":
            duplicate = any(
                t.get("type") == payload.type and not str(t.get("id", "")).startswith("default_")
                for t in templates
            )
            if duplicate:
                raise ValueError("A template of this type already exists")

        template_id = f"template_{int(time.time() * 1000)}"
        existing_ids = {t.get("id") for t in templates}
        while template_id in existing_ids:
            template_id = f"template_{int(template_id.split('_')[1]) + 1}"

        now = _now_iso()
        template = {
            "id": template_id,
            **payload.to_dict(exclude_none=True),
            "createdAt": now,
            "updatedAt": now,
            "createdBy": created_by,
        }
        templates.append(template)
        self._save(settings, templates)

        logger.info(f"Email template {template_id} ({payload.type}) created for store {store.subdomain}")
        return template

    def update(self, store: Store, payload: EmailTemplateUpdate) -> Dict[str, Any]:
        """
        Raises:
            LookupError: no settings row or unknown template id
        """
        settings = self.stores.get_settings(store.id)
        if settings is None:
            raise LookupError("Store settings not found")

        templates = _templates_of(settings)
        index = next((i for i, t in enumerate(templates) if t.get("id") == payload.id), None)
        if index is None:
            raise LookupError("Template not found")

        templates[index] = {
            **templates[index],
            **payload.to_dict(exclude_unset=True),
            "updatedAt": _now_iso(),
        }
        self._save(settings, templates)
        return templates[index]

    def delete(self, store: Store, template_id: str) -> None:
        settings = self.stores.get_settings(store.id)
        if settings is None:
            raise LookupError("Store settings not found")

        templates = _templates_of(settings)
        remaining = [t for t in templates if t.get("id") != template_id]
        if len(remaining) == len(templates):
            raise LookupError("Template not found")

        self._save(settings, remaining)
