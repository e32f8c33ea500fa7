"""
Content Generation Service

Generates store copy (product descriptions, campaigns, social posts, store
analysis) with Claude. When the provider is not configured or fails, a canned
text for the task is returned instead so the dashboard flow never breaks.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import anthropic

from store_admin.core.config import settings

logger = logging.getLogger(__name__)

# ============================================================================
# CONFIGURATION
# ============================================================================

MAX_TOKENS = 500
TEMPERATURE = 0.7

TONE_INSTRUCTIONS = {
    "professional": "Use a professional, authoritative tone with formal language.",
    "casual": "Use a friendly, conversational tone like talking to a friend.",
    "enthusiastic": "Use an exciting, energetic tone with enthusiasm and emojis.",
}

ASSISTANT_PERSONA = """You are the store's AI assistant, a professional e-commerce assistant.

Characteristics:
- Use a friendly and professional tone
- Respond in English
- You are an e-commerce expert
- Provide practical and actionable suggestions
- Use emojis moderately
- Keep responses concise and clear

Areas where you can help:
- Product descriptions and SEO
- Campaign strategies
- Email and SMS marketing copy
- Social media content
- Sales improvement tactics
- Store performance analysis
- Inventory management advice"""

FALLBACK_RESPONSES = {
    "product_description": (
        "This product is carefully crafted from high-quality materials. It stands out with its "
        "modern design and superior craftsmanship. Ideal for both daily use and special occasions. "
        "Its durable construction ensures years of reliable use."
    ),
    "email_campaign": """Dear Valued Customer,

We're excited to share our exclusive campaign with you!

- 25% off on selected items
- Free shipping on orders over $50
- Surprise gift for the first 50 customers

Don't miss out! This offer is valid for 3 days only.

Best regards,
The Store Team""",
    "social_media": """NEW SEASON, NEW OPPORTUNITIES!

- 20% off all products
- Buy 2 get 1 free
- Fast and secure delivery

Grab yours before stocks run out!

#newseason #discount #shopping #sale #deals""",
    "campaign": """CAMPAIGN STRATEGY

Goal: New customer acquisition and sales growth
Duration: 7 days

Discounts:
- 15% off first purchase
- 20% off orders over $100
- Buy 3 get 1 free

Channels:
- Email marketing
- SMS campaigns
- Social media ads""",
    "store_analysis": """STORE ANALYSIS

Areas for Improvement:
- Increase social media presence
- Email marketing automation
- Customer loyalty program

Recommendations:
1. Start a weekly email newsletter
2. Highlight customer reviews
3. Plan seasonal campaigns""",
    "chat": """Hello!

I'm your AI assistant. I can help you with:

- Writing product descriptions
- Creating email campaigns
- Preparing social media content
- Developing marketing strategies
- Store performance analysis

How can I assist you today?""",
}


def get_fallback_response(task: str) -> str:
    return FALLBACK_RESPONSES.get(task, FALLBACK_RESPONSES["chat"])


def build_prompts(task: str, prompt: str, data: Dict[str, Any]) -> Tuple[str, str]:
    """
    System and user prompt for a generation task

    Returns:
        Tuple of (system_prompt, user_prompt)
    """
    if task == "product_description":
        tone = TONE_INSTRUCTIONS.get(data.get("tone") or "professional", TONE_INSTRUCTIONS["professional"])
        keywords = data.get("keywords") or ""
        product_type = data.get("productType") or "product"
        keyword_hint = f" Include these keywords naturally: {keywords}." if keywords else ""
        return (
            f"You are an e-commerce expert specializing in product descriptions. {tone} Respond in English.",
            f'Write an SEO-friendly, sales-focused product description for a {product_type} called "{prompt}".'
            f"{keyword_hint} Make it compelling and around 100-150 words.",
        )

    if task == "email_campaign":
        return (
            "You are an email marketing expert. Respond in English.",
            f"Create a professional email campaign text: {prompt}",
        )

    if task == "social_media":
        return (
            "You are a social media expert. Respond in English.",
            f"Create a social media post with emojis and hashtags: {prompt}",
        )

    if task == "campaign":
        return (
            "You are a marketing strategist. Respond in English.",
            f"Suggest a detailed campaign strategy: {prompt}",
        )

    if task == "store_analysis":
        store_info = ""
        store_context = data.get("storeContext")
        if store_context:
            store_info = (
                f"Store: {store_context.get('name')}, {store_context.get('productCount')} products, "
                f"{store_context.get('orderCount')} orders. "
            )
        return (
            "You are an e-commerce consultant. Respond in English.",
            f"{store_info}Provide analysis and recommendations: {prompt}",
        )

    return ASSISTANT_PERSONA, prompt


@dataclass
class GenerationResult:
    """Result of a generation request"""
    result: str
    model: str
    task: str
    provider: str
    tokens_used: int = 0
    language: str = "en"
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "result": self.result,
            "model": self.model,
            "task": self.task,
            "language": self.language,
            "usage": {
                "model": self.model,
                "provider": self.provider,
                "timestamp": self.timestamp,
                "tokens_used": self.tokens_used,
            },
        }


# ============================================================================
# MAIN SERVICE CLASS
# ============================================================================

class ContentGenerationService:
    """
    Service for AI content generation with Claude
    """

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        api_key = api_key if api_key is not None else settings.ANTHROPIC_API_KEY
        self.model = model or settings.CLAUDE_MODEL
        self.client = anthropic.Anthropic(api_key=api_key) if api_key else None

        if self.client is None:
            logger.warning("ANTHROPIC_API_KEY not set - content generation will use fallback texts")
        else:
            logger.info(f"ContentGenerationService initialized with model: {self.model}")

    @property
    def configured(self) -> bool:
        return self.client is not None

    def _fallback(self, task: str) -> GenerationResult:
        return GenerationResult(
            result=get_fallback_response(task),
            model="fallback",
            task=task,
            provider="local",
        )

    def generate(self, prompt: str, task: str = "chat", data: Optional[Dict[str, Any]] = None) -> GenerationResult:
        """
        Generate content for a task

        Args:
            prompt: User prompt (product name for product_description)
            task: product_description | email_campaign | social_media | campaign | store_analysis | chat
            data: Task options (tone, keywords, productType, storeContext)

        Returns:
            GenerationResult, from the provider or the fallback table
        """
        if not self.configured:
            return self._fallback(task)

        system_prompt, user_prompt = build_prompts(task, prompt or "", data or {})

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=MAX_TOKENS,
                temperature=TEMPERATURE,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}]
            )
        except anthropic.APIError as e:
            logger.error(f"Claude API failed for task {task}: {e}")
            return self._fallback(task)

        text_content = None
        for block in response.content:
            if hasattr(block, "text"):
                text_content = block.text
                break

        return GenerationResult(
            result=text_content or "No response received",
            model=self.model,
            task=task,
            provider="anthropic",
            tokens_used=response.usage.input_tokens + response.usage.output_tokens,
        )


# ============================================================================
# SINGLETON INSTANCE
# ============================================================================

_service_instance: Optional[ContentGenerationService] = None


def get_generation_service() -> ContentGenerationService:
    """
    Get the singleton generation service instance.

    Returns:
        ContentGenerationService instance
    """
    global _service_instance
    if _service_instance is None:
        _service_instance = ContentGenerationService()
    return _service_instance
