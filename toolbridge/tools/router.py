"""Rule-based tool-need classifier — decides, without the LLM, whether a
turn is worth offering tool declarations to the model.

A miss only degrades the turn to plain chat; a false hit only offers
tools the model won't call.
"""
import re
import logging
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)

_ARITHMETIC = re.compile(r"\d+\s*[+\-*/]\s*\d+")

TOOL_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "math": ("calculate", "add", "sum", "plus", "minus", "multiply", "divide", "math"),
    "dictionary": ("define", "definition", "meaning"),
    "social": ("tweet", "post", "twitter", "share", "publish"),
}


def has_arithmetic(message: str) -> bool:
    return _ARITHMETIC.search(message) is not None


def matched_domains(message: str) -> List[str]:
    """Tool domains whose signals appear in the message, in catalog order."""
    lower = message.lower()
    domains = [
        domain for domain, keywords in TOOL_KEYWORDS.items()
        if any(kw in lower for kw in keywords)
    ]
    if "math" not in domains and has_arithmetic(message):
        domains.insert(0, "math")
    return domains


def should_use_tools(message: str) -> bool:
    return has_arithmetic(message) or any(
        kw in message.lower() for keywords in TOOL_KEYWORDS.values() for kw in keywords
    )
