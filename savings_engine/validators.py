import re

# --- Sanitizer Patterns ---
ANGLE_BRACKETS_PATTERN = re.compile(r"[<>]")
JAVASCRIPT_SCHEME_PATTERN = re.compile(r"javascript:", re.IGNORECASE)
EVENT_HANDLER_PATTERN = re.compile(r"on\w+=", re.IGNORECASE)

# --- Validation Patterns ---
# Canadian postal code: letter-digit-letter digit-letter-digit.
# D, F, I, O, Q, U never appear; W and Z are not used as the first letter.
POSTAL_CODE_PATTERN = re.compile(r"[A-CEJ-NPR-TVXY][0-9][A-CEJ-NPR-TV-Z][0-9][A-CEJ-NPR-TV-Z][0-9]")
EMAIL_PATTERN = re.compile(
    r"[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*"
)
# 10 digits; area code and exchange code both start with 2-9
CANADIAN_PHONE_PATTERN = re.compile(r"[2-9][0-9]{2}[2-9][0-9]{2}[0-9]{4}")
NON_DIGIT_PATTERN = re.compile(r"[^0-9]")

MAX_EMAIL_LENGTH = 254


def sanitize_input(text) -> str:
    """
    Strips markup-ish content from free-text input: angle brackets, `javascript:`
    schemes and inline `onxxx=` handlers, then trims whitespace.
    Applied until nothing changes, so sanitize_input(sanitize_input(x)) == sanitize_input(x).
    """
    if text is None:
        return ""
    cleaned = str(text)
    while True:
        previous = cleaned
        cleaned = ANGLE_BRACKETS_PATTERN.sub("", cleaned)
        cleaned = JAVASCRIPT_SCHEME_PATTERN.sub("", cleaned)
        cleaned = EVENT_HANDLER_PATTERN.sub("", cleaned)
        cleaned = cleaned.strip()
        if cleaned == previous:
            return cleaned


def validate_postal_code(code) -> bool:
    if not isinstance(code, str):
        return False
    clean_postal = "".join(code.split()).upper()
    return POSTAL_CODE_PATTERN.fullmatch(clean_postal) is not None


def validate_email(email) -> bool:
    if not isinstance(email, str):
        return False
    return len(email) <= MAX_EMAIL_LENGTH and EMAIL_PATTERN.fullmatch(email) is not None


def validate_canadian_phone(phone) -> bool:
    if not isinstance(phone, str):
        return False
    clean_phone = NON_DIGIT_PATTERN.sub("", phone)
    return CANADIAN_PHONE_PATTERN.fullmatch(clean_phone) is not None


def validate_non_empty(value) -> bool:
    return isinstance(value, str) and value.strip() != ""


# --- Validator Dispatch Table ---
# Questions reference validators by tag; "none" means "use the default non-empty rule".
VALIDATORS = {
    "postal_code": validate_postal_code,
    "email": validate_email,
    "phone": validate_canadian_phone,
    "non_empty": validate_non_empty,
    "none": validate_non_empty,
}


def run_validator(kind, value) -> bool:
    """Dispatches to the validator registered for `kind`; unknown kinds fall back to non-empty."""
    validator = VALIDATORS.get(kind or "none", validate_non_empty)
    return validator(value)
