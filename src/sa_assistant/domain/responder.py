"""Canned-response matcher for the assistant chat.

Replies come from a static table keyed by the exact prompt text (the four
quick actions offered by the chat screen). Anything else gets a generic
reply that quotes the prompt back.
"""

from dataclasses import dataclass
from datetime import datetime

CANNED_RESPONSES: dict[str, str] = {
    "Generate a business plan": (
        "I'd be happy to help you create a business plan! Let's start with your "
        "core idea. What product or service would you like to build? I'll help you "
        "outline the market opportunity, revenue model, and growth strategy."
    ),
    "Find trending plugins": (
        "Here are the top trending plugins right now:\n\n"
        "1. CryptoPool - Liquidity pooling (12.4K downloads)\n"
        "2. MAGA - Market Analytics (15.6K downloads)\n"
        "3. CopyX - Copy Trading (8.9K downloads)\n\n"
        "Would you like details on any of these?"
    ),
    "Analyze my investments": (
        "Let me analyze your portfolio:\n\n"
        "Total Value: 15,290 coins\n"
        "Total Return: +22.8%\n"
        "Best Performer: CryptoPool Plugin (+35%)\n\n"
        "Your portfolio is well-diversified across users and plugins. Consider "
        "increasing allocation to high-rating users for stable returns."
    ),
    "Create a workspace": (
        "I'll help you set up a new workspace! The plugin editor supports:\n\n"
        "- Visual node-based workflows\n"
        "- Custom triggers and actions\n"
        "- API integrations\n"
        "- Automated testing\n\n"
        "Shall I guide you through creating your first plugin?"
    ),
}

_FALLBACK_TEMPLATE = (
    'I understand you\'re asking about "{prompt}". That\'s a great question! Let me '
    "help you with that. Based on the current market trends and your profile, I'd "
    "recommend exploring our marketplace for relevant tools and connecting with "
    "top-rated users in this space. Would you like me to provide more specific "
    "recommendations?"
)


def reply_for(prompt: str) -> str:
    """Exact-match lookup; no normalisation of case or whitespace."""
    canned = CANNED_RESPONSES.get(prompt)
    if canned is not None:
        return canned
    return _FALLBACK_TEMPLATE.format(prompt=prompt)


@dataclass
class ChatMessage:
    id: str
    user_id: str
    role: str                        # ChatRole value
    content: str
    created_at: datetime | None = None
