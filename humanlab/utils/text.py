from humanlab.core.errors import TextValidationError


def is_blank(text: object) -> bool:
    return not isinstance(text, str) or not text.strip()


def require_text(text: object) -> str:
    if is_blank(text):
        raise TextValidationError()
    return text


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
