"""
Translation Service

Translates store content (products, categories, pages, policies) with Claude.
Single texts and batches of {field, text} items are supported; when the
provider is unavailable every text is returned as a labelled placeholder.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import anthropic

from store_admin.core.config import settings

logger = logging.getLogger(__name__)

# ============================================================================
# CONFIGURATION
# ============================================================================

MAX_TOKENS = 2000
TEMPERATURE = 0.3

LANGUAGE_NAMES = {
    "en": "English",
    "tr": "Turkish",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "zh": "Chinese",
    "ja": "Japanese",
    "ko": "Korean",
    "ar": "Arabic",
    "hi": "Hindi",
    "nl": "Dutch",
    "sv": "Swedish",
    "pl": "Polish",
}

CONTEXT_INSTRUCTIONS = {
    "product": "This is a product name/title and description for an e-commerce store. "
               "Maintain marketing appeal and SEO optimization.",
    "category": "This is a category name and description for organizing products. Keep it clear and concise.",
    "page": "This is web page content. Maintain formatting, HTML tags if present, and readability.",
    "blogPost": "This is blog post content. Preserve the tone, style, and any technical terms appropriately.",
    "policy": "This is a legal/policy document. Maintain formal tone and legal accuracy.",
    "general": "Translate naturally while preserving the original meaning and tone.",
}

SYSTEM_PROMPT = "You are a professional translator. Respond only with the translated text, nothing else."

FALLBACK_WARNING = "AI translation unavailable, showing placeholder"


def language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code, code)


def build_translation_prompt(text: str, from_language: str, to_language: str, context: str) -> str:
    instruction = CONTEXT_INSTRUCTIONS.get(context, CONTEXT_INSTRUCTIONS["general"])
    return f"""You are a professional translator specializing in e-commerce content.

Context: {instruction}

Translate the following text from {language_name(from_language)} to {language_name(to_language)}:
"{text}"

Requirements:
- Provide ONLY the translated text, no explanations or notes
- Maintain the original tone and style
- Preserve any HTML tags or formatting if present
- Ensure cultural appropriateness for the target language
- Keep product names, brand names, and technical terms appropriately localized"""


def placeholder(text: str, to_language: str) -> str:
    return f"[Translation to {language_name(to_language)}]: {text}"


@dataclass
class BatchTranslation:
    translations: List[Dict[str, str]]
    warning: Optional[str] = None


# ============================================================================
# MAIN SERVICE CLASS
# ============================================================================

class TranslationService:
    """
    Service for AI translation with Claude
    """

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        api_key = api_key if api_key is not None else settings.ANTHROPIC_API_KEY
        self.model = model or settings.CLAUDE_MODEL
        self.client = anthropic.Anthropic(api_key=api_key) if api_key else None

        if self.client is None:
            logger.warning("ANTHROPIC_API_KEY not set - translations will return placeholders")

    def _complete(self, text: str, from_language: str, to_language: str, context: str) -> str:
        if self.client is None:
            raise RuntimeError("Translation provider not configured")

        response = self.client.messages.create(
            model=self.model,
            max_tokens=MAX_TOKENS,
            temperature=TEMPERATURE,
            system=SYSTEM_PROMPT,
            messages=[{
                "role": "user",
                "content": build_translation_prompt(text, from_language, to_language, context),
            }]
        )

        for block in response.content:
            if hasattr(block, "text"):
                return block.text.strip()
        return ""

    def translate(self, text: str, from_language: str, to_language: str, context: str = "general"):
        """
        Translate a single text

        Returns:
            Tuple of (translation, warning). warning is set when a placeholder was returned.
        """
        try:
            return self._complete(text, from_language, to_language, context), None
        except (anthropic.APIError, RuntimeError) as e:
            logger.error(f"Translation to {to_language} failed: {e}")
            return placeholder(text, to_language), FALLBACK_WARNING

    def translate_batch(
        self,
        texts: List[Dict[str, str]],
        from_language: str,
        to_language: str,
        context: str = "general"
    ) -> BatchTranslation:
        """
        Translate [{field, text}, ...] items

        If any item fails, the whole batch falls back to placeholders so the
        caller never saves a half-translated record.
        """
        try:
            translations = [
                {
                    "field": item.get("field"),
                    "translation": self._complete(item.get("text", ""), from_language, to_language, context),
                }
                for item in texts
            ]
            return BatchTranslation(translations=translations)
        except (anthropic.APIError, RuntimeError) as e:
            logger.error(f"Batch translation to {to_language} failed: {e}")
            return BatchTranslation(
                translations=[
                    {"field": item.get("field"), "translation": placeholder(item.get("text", ""), to_language)}
                    for item in texts
                ],
                warning=FALLBACK_WARNING,
            )


# ============================================================================
# SINGLETON INSTANCE
# ============================================================================

_service_instance: Optional[TranslationService] = None


def get_translation_service() -> TranslationService:
    global _service_instance
    if _service_instance is None:
        _service_instance = TranslationService()
    return _service_instance
