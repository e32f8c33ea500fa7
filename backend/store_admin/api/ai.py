"""
AI content endpoints backed by Claude

Endpoints:
- POST /api/ai/generate  - Generate store content for a task
- GET  /api/ai/generate  - Provider configuration status
- POST /api/ai/translate - Translate a text or a batch of {field, text}
- GET  /api/ai/translate - Supported languages

Both POST endpoints accept a dashboard session or an internal call from the
actions dispatcher.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field

from store_admin.core.auth import TokenUser, require_session_or_internal
from store_admin.domain.base import CamelModel
from store_admin.services.content_generation_service import (
    ContentGenerationService,
    FALLBACK_RESPONSES,
    get_generation_service,
)
from store_admin.services.translation_service import (
    CONTEXT_INSTRUCTIONS,
    LANGUAGE_NAMES,
    TranslationService,
    get_translation_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])


# ============================================================================
# REQUEST MODELS
# ============================================================================

class GenerateRequest(CamelModel):
    prompt: str = ""
    task: str = "chat"
    data: Dict[str, Any] = Field(default_factory=dict)


class TranslateItem(CamelModel):
    field: str
    text: str = ""


class TranslateRequest(CamelModel):
    text: Optional[str] = None
    batch: bool = False
    texts: List[TranslateItem] = Field(default_factory=list)
    from_language: str = "en"
    to_language: str = "tr"
    context: str = "general"


# ============================================================================
# ENDPOINT: /api/ai/generate
# ============================================================================

@router.post("/generate")
def generate(
    request: GenerateRequest,
    user: Optional[TokenUser] = Depends(require_session_or_internal),
    service: ContentGenerationService = Depends(get_generation_service),
):
    """
    Generate content for a task

    Tasks: product_description (tone, keywords, productType in data),
    email_campaign, social_media, campaign, store_analysis (storeContext),
    anything else goes to the assistant persona.

    Returns:
        {"success": true, "data": {result, model, task, language, usage}}
    """
    try:
        result = service.generate(request.prompt, task=request.task, data=request.data)
        return {"success": True, "data": result.to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Generation failed for task {request.task}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Internal server error", "details": str(e)},
        )


@router.get("/generate")
def generation_status(service: ContentGenerationService = Depends(get_generation_service)):
    return {
        "configured": service.configured,
        "service": "anthropic",
        "model": service.model,
        "message": (
            "AI generation is configured and ready"
            if service.configured else
            "ANTHROPIC_API_KEY not set, responses use built-in fallback texts"
        ),
        "tasks": sorted(FALLBACK_RESPONSES.keys()),
    }


# ============================================================================
# ENDPOINT: /api/ai/translate
# ============================================================================

@router.post("/translate")
def translate(
    request: TranslateRequest,
    user: Optional[TokenUser] = Depends(require_session_or_internal),
    service: TranslationService = Depends(get_translation_service),
):
    """
    Translate a single text or a batch

    Returns:
        batch:  {"success": true, "translations": [{field, translation}]}
        single: {"success": true, "translation", "fromLanguage", "toLanguage"}
        A "warning" is added when placeholders were returned.
    """
    if not request.batch and not request.text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Text is required")
    if request.batch and not request.texts:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Texts array is required for batch translation",
        )

    try:
        if request.batch:
            result = service.translate_batch(
                [item.model_dump() for item in request.texts],
                request.from_language,
                request.to_language,
                request.context,
            )
            response: Dict[str, Any] = {"success": True, "translations": result.translations}
            warning = result.warning
        else:
            translation, warning = service.translate(
                request.text, request.from_language, request.to_language, request.context
            )
            response = {
                "success": True,
                "translation": translation,
                "fromLanguage": request.from_language,
                "toLanguage": request.to_language,
            }

        if warning:
            response["warning"] = warning
        return response

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Translation to {request.to_language} failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Translation failed", "details": str(e)},
        )


@router.get("/translate")
def translation_status():
    return {
        "service": "AI Translation Service",
        "status": "active",
        "supportedLanguages": list(LANGUAGE_NAMES.keys()),
        "contexts": list(CONTEXT_INSTRUCTIONS.keys()),
        "features": [
            "Single text translation",
            "Batch translation",
            "Context-aware translation",
        ],
    }
