"""
Guardrails for user text headed to an agent and agent text headed back.

Over-long or empty input is rejected. Prompt-injection phrasing is only
logged; blocking it produced false positives on ordinary business questions.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 10000
MAX_RESPONSE_LENGTH = 50000
TRUNCATION_NOTICE = "\n\n[Response truncated due to length]"

_INJECTION = re.compile(
    r"ignore\s+(all\s+)?(previous\s+instructions|above)"
    r"|disregard\s+(all\s+)?previous"
    r"|you\s+are\s+now\s+an?\s+"
    r"|<\s*system\s*>",
    re.IGNORECASE,
)


@dataclass
class GuardrailResult:
    allowed: bool
    reason: Optional[str] = None
    modified_text: Optional[str] = None


def check_input(message: str, user_id: str = "", field: str = "Message") -> GuardrailResult:
    """Validate one user-supplied text field before it reaches a prompt."""
    if len(message) > MAX_MESSAGE_LENGTH:
        return GuardrailResult(
            allowed=False,
            reason=f"{field} too long ({len(message)} chars). Maximum is {MAX_MESSAGE_LENGTH}.",
        )
    if not message.strip():
        return GuardrailResult(allowed=False, reason=f"{field} is empty.")

    if _INJECTION.search(message):
        logger.warning("Possible prompt injection from user=%s: %s", user_id, message[:100])
    return GuardrailResult(allowed=True)


def check_output(response: str) -> GuardrailResult:
    if len(response) > MAX_RESPONSE_LENGTH:
        return GuardrailResult(
            allowed=True,
            modified_text=response[:MAX_RESPONSE_LENGTH] + TRUNCATION_NOTICE,
        )
    return GuardrailResult(allowed=True)
