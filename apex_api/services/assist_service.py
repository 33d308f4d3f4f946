from __future__ import annotations

import json
from typing import Any

import structlog

from apex_api.models.schemas import ChatHistoryItem, ChatResponse, QuickAction
from apex_api.services.gemini_client import GeminiClient, GeminiError

logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = """You are APEX AI Assistant, an expert insurance advisor.

Your Role:
- Be friendly, professional, and empathetic
- Explain insurance concepts in simple terms
- Keep responses concise (2-3 paragraphs max)
"""

FALLBACK_REPLY = (
    "I apologize, but I'm having trouble processing your request right now. "
    "Please try again in a moment, or contact our support team for immediate assistance. 😊"
)
WELCOME_MESSAGE = "Hi! 👋 I'm your APEX AI Assistant. How can I help you today?"
HISTORY_LIMIT = 10

INTENT_MAP = {
    "claims": ["claim", "file", "reimburse", "status"],
    "policies": ["policy", "policies", "coverage", "renew"],
    "dna_results": ["dna", "genetic", "gene", "lab", "kit"],
    "plans": ["plan", "compare", "quote", "health insurance", "auto", "travel"],
    "savings": ["save", "saving", "discount", "cheaper", "price"],
    "support": ["help", "contact", "emergency", "office hours", "support"],
}

QUICK_ACTIONS: dict[str, list[QuickAction]] = {
    "/": [
        QuickAction(id="1", label="View Plans", icon="💎", navigate="/products"),
        QuickAction(id="2", label="How It Works", icon="🤔", message="How does APEX insurance work?"),
        QuickAction(id="3", label="Get Started", icon="🚀", navigate="/"),
    ],
    "/dashboard": [
        QuickAction(id="1", label="Explain DNA Results", icon="🧬", message="Can you explain my DNA analysis results?"),
        QuickAction(id="2", label="My Policies", icon="📋", message="Show me my current policies"),
        QuickAction(id="3", label="Savings Calculator", icon="💰", message="How much am I saving with APEX?"),
    ],
    "/claims": [
        QuickAction(id="1", label="Check Status", icon="🔍", message="What's the status of my claim?"),
        QuickAction(id="2", label="File New Claim", icon="📝", message="How do I file a new claim?"),
        QuickAction(id="3", label="Upload Documents", icon="📎", message="What documents do I need for a claim?"),
    ],
    "/products": [
        QuickAction(id="1", label="Health Plans", icon="🏥", message="Tell me about health insurance plans"),
        QuickAction(id="2", label="Auto Plans", icon="🚗", message="What auto insurance options do you have?"),
        QuickAction(id="3", label="Compare Plans", icon="⚖️", message="Help me compare different plans"),
    ],
    "/about": [
        QuickAction(id="1", label="Contact Us", icon="📞", navigate="/contact"),
        QuickAction(id="2", label="Get Quote", icon="💵", navigate="/products"),
    ],
    "/contact": [
        QuickAction(id="1", label="Office Hours", icon="🕐", message="What are your office hours?"),
        QuickAction(id="2", label="Emergency Support", icon="🚨", message="I need emergency claim support"),
    ],
}
DEFAULT_QUICK_ACTIONS = [
    QuickAction(id="1", label="View Dashboard", icon="📊", navigate="/dashboard"),
    QuickAction(id="2", label="Browse Plans", icon="💎", navigate="/products"),
    QuickAction(id="3", label="Help", icon="❓", message="What can you help me with?"),
]


def classify_intent(text: str) -> tuple[str, float, list[str]]:
    lower = text.lower()
    best_intent = "general_query"
    best_keywords: list[str] = []

    for intent, keywords in INTENT_MAP.items():
        matched = [kw for kw in keywords if kw in lower]
        if len(matched) > len(best_keywords):
            best_intent = intent
            best_keywords = matched

    confidence = 0.2 if not best_keywords else min(0.4 + 0.15 * len(best_keywords), 0.95)
    return best_intent, round(confidence, 2), best_keywords


def build_chat_prompt(
    message: str, context: dict[str, Any], history: list[ChatHistoryItem]
) -> str:
    sections = [SYSTEM_PROMPT]
    if context:
        sections.append(f"Context:\n{json.dumps(context, ensure_ascii=False, default=str)}")
    if history:
        turns = [
            f"{'User' if item.sender == 'user' else 'Assistant'}: {item.text}"
            for item in history[-HISTORY_LIMIT:]
        ]
        sections.append("Conversation so far:\n" + "\n".join(turns))
    sections.append(f"User: {message}")
    return "\n\n".join(sections)


def reply_to_chat(
    message: str,
    context: dict[str, Any],
    history: list[ChatHistoryItem],
    gemini: GeminiClient,
) -> ChatResponse:
    intent, confidence, keywords = classify_intent(message)
    try:
        reply = gemini.generate_content(build_chat_prompt(message, context, history))
        success = True
    except GeminiError as exc:
        logger.warning("chat_reply_failed", error=str(exc), intent=intent)
        reply = FALLBACK_REPLY
        success = False

    return ChatResponse(
        reply=reply,
        success=success,
        intent=intent,
        confidence=confidence,
        matched_keywords=keywords,
    )


def welcome_message() -> str:
    return WELCOME_MESSAGE


def quick_actions(page: str) -> list[QuickAction]:
    return QUICK_ACTIONS.get(page, DEFAULT_QUICK_ACTIONS)
