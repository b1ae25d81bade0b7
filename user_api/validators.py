"""Input validators."""

from email_validator import EmailNotValidError, validate_email


def is_email_valid(email):
    """Return True if ``email`` is a syntactically valid address with a dotted domain."""
    if not isinstance(email, str):
        return False
    try:
        result = validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    # single-letter top-level domains are not conventional addresses
    return len(result.ascii_domain.rsplit(".", 1)[-1]) >= 2
