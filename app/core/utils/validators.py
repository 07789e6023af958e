from phonenumbers import parse, is_valid_number, NumberParseException, format_number, PhoneNumberFormat
from app.core.config import DEFAULT_PHONE_REGION


def normalize_phone_or_none(v: str | None, default_region: str | None = DEFAULT_PHONE_REGION) -> str | None:
    if v is None or not v.strip():
        return None
    try:
        num = parse(v, default_region)
    except NumberParseException:
        raise ValueError("Invalid phone number")
    if not is_valid_number(num):
        raise ValueError("Invalid phone number")
    return format_number(num, PhoneNumberFormat.E164)


def normalize_username(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    if v and not v.replace("_", "").replace(".", "").replace("-", "").isalnum():
        raise ValueError("Username may contain only letters, digits, '.', '-' and '_'")
    return v or None
