import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PH_PHONE_PATTERN = re.compile(r"^\+63\d{10}$")
OTP_PATTERN = re.compile(r"^\d{6}$")


def validate_email(value: str) -> str:
    """Trim, lower-case and check the basic shape of an email address."""
    value = (value or "").strip().lower()
    if not value:
        raise ValueError("Email is required")
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email format")
    return value


def validate_phone_number(value: str) -> str:
    """Normalize a Philippine mobile number to +63XXXXXXXXXX."""
    value = re.sub(r"[\s\-()]", "", value or "")
    if value.startswith("09") and len(value) == 11:
        value = "+63" + value[1:]
    elif value.startswith("63") and len(value) == 12:
        value = "+" + value
    if not PH_PHONE_PATTERN.match(value):
        raise ValueError("Invalid phone number format. Use +63XXXXXXXXXX")
    return value


def validate_otp_code(value: str) -> str:
    value = (value or "").strip()
    if not OTP_PATTERN.match(value):
        raise ValueError("OTP must be 6 digits")
    return value


def require_text(value: str, field_name: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{field_name} is required")
    return value
