"""
API endpoint for the dashboard AI assistant actions

Endpoints:
- POST /api/ai/actions - Execute a named action against an owned store
- GET  /api/ai/actions - List available actions and their fields
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from store_admin.api.dependencies import store_not_found
from store_admin.core.auth import TokenUser, get_current_user
from store_admin.core.database import get_db
from store_admin.repositories import StoreRepository
from store_admin.services.ai_actions_service import (
    ACTIONS_MANIFEST,
    ActionFailedError,
    AIActionsService,
    UnknownActionError,
)
from store_admin.services.internal_api_client import InternalApiClient, get_internal_client

logger = logging.getLogger(__name__)

# ============================================================================
# ROUTER
# ============================================================================

router = APIRouter(prefix="/api/ai/actions", tags=["ai-actions"])


# ============================================================================
# REQUEST MODELS
# ============================================================================

class ActionRequest(BaseModel):
    """Request body for the actions endpoint"""
    action: str = Field(..., min_length=1)
    subdomain: str = Field(..., min_length=1)
    data: Dict[str, Any] = Field(default_factory=dict)


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post("")
async def execute_action(
    request: ActionRequest,
    user: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: InternalApiClient = Depends(get_internal_client),
):
    """
    Execute an assistant action

    Returns:
        {"success": true, "action": ..., "data": ..., "message": ...}
    """
    store = StoreRepository(db).find_owned(request.subdomain, user.id)
    if store is None:
        raise store_not_found()

    service = AIActionsService(db, store, client)
    try:
        return await service.execute(request.action, request.data)
    except UnknownActionError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown action")
    except ActionFailedError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Internal server error", "details": str(e)},
        )


@router.get("")
async def list_actions():
    return {"actions": ACTIONS_MANIFEST}
