"""
Email Templates API Endpoints

Templates are edited in the dashboard and stored inside the store's email
settings. New templates can be copied from the built-in library with
`fromTemplate`.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from store_admin.api.dependencies import get_owned_store, parse_body, server_error
from store_admin.core.auth import TokenUser, get_current_user
from store_admin.core.database import get_db
from store_admin.domain.email_template import EmailTemplateInput, EmailTemplateUpdate
from store_admin.models import Store
from store_admin.services.email_template_service import EmailTemplateService, template_body_from_default

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stores/{subdomain}/email-templates", tags=["Email Templates"])


@router.get("")
def list_templates(
    template_type: Optional[str] = Query(None, alias="type"),
    enabled: Optional[bool] = Query(None),
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    return EmailTemplateService(db).list(store, template_type=template_type, enabled=enabled)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_template(
    body: Dict[str, Any] = Body(...),
    user: TokenUser = Depends(get_current_user),
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    """
    Create a template

    With {"fromTemplate": "<key>"} the library template fills name, subject,
    content and variables.
    """
    if body.get("fromTemplate"):
        try:
            body = template_body_from_default(body)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    payload = parse_body(EmailTemplateInput, body)

    try:
        template = EmailTemplateService(db).create(store, payload, created_by=user.email)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create email template in {store.subdomain}: {e}", exc_info=True)
        raise server_error("Failed to create email template", e)

    return {"message": "Email template created successfully", "template": template}


@router.put("")
def update_template(
    payload: EmailTemplateUpdate,
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    try:
        template = EmailTemplateService(db).update(store, payload)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return {"message": "Email template updated successfully", "template": template}


@router.delete("")
def delete_template(
    template_id: Optional[str] = Query(None, alias="id"),
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    if not template_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Template ID is required")

    try:
        EmailTemplateService(db).delete(store, template_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return {"message": "Email template deleted successfully"}
