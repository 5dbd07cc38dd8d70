"""Common validation helpers for user use cases."""

from cdstock.domain.errors import ValidationError

MIN_PASSWORD_LENGTH = 6


def ensure_valid_email(email: str) -> str:
    """Return a normalized email address or raise ``ValidationError``."""

    normalized = (email or "").strip()
    if normalized.count("@") != 1:
        raise ValidationError("A valid email address is required")

    local_part, domain = normalized.split("@", 1)
    if not local_part or "." not in domain:
        raise ValidationError("A valid email address is required")

    return f"{local_part}@{domain.lower()}"


def ensure_valid_password(password: str) -> str:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    return password


def ensure_display_name(name: str | None, *, fallback: str) -> str:
    cleaned = (name or "").strip()
    return cleaned or fallback
