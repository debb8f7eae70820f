"""Security helpers: PII masking for chat text that ends up in logs."""
import re

_LONG_DIGITS = re.compile(r"\b\d{7,}\b")
_EMAIL = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")


def mask_pii(text: str) -> str:
    # Phone numbers and emails show up when people paste franchise enquiries into the chat
    if not text:
        return ""
    masked = _EMAIL.sub("[EMAIL]", text)
    masked = _LONG_DIGITS.sub("[REDACTED]", masked)
    return masked
