"""Input validation utilities for page-signal payloads."""

from collections.abc import Mapping
from typing import Any


class InvalidInputError(ValueError):
    """Raised for any payload the engine cannot interpret."""


class ConfigurationError(ValueError):
    """Raised when settings.yaml cannot be parsed or holds an invalid value."""


def validate_content(content: Any) -> tuple[bool, str]:
    """Validate the extracted body text.

    Args:
        content: Body text produced by the HTML parser.  ``None`` is
            accepted and treated as an empty page.

    Returns:
        Tuple of (is_valid, error_message).  error_message is empty on success.
    """
    if content is None:
        return True, ""
    if not isinstance(content, str):
        return False, f"Content must be a string, got {type(content).__name__}."
    return True, ""


def validate_token_list(value: Any, field: str) -> tuple[bool, str]:
    """Validate a list of pre-tokenized keywords.

    Args:
        value: Candidate list.  ``None`` counts as an empty list.
        field: Field name used in the error message.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if value is None:
        return True, ""
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        return False, f"{field} must be a list of strings."
    bad = [item for item in value if not isinstance(item, str)]
    if bad:
        return False, f"{field} contains {len(bad)} non-string item(s)."
    return True, ""


def validate_heading(heading: Any) -> tuple[bool, str]:
    """Validate one ``{tag, text, keywords}`` heading entry.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not isinstance(heading, Mapping):
        return False, "Heading entry must be a mapping."
    tag = heading.get("tag", "")
    if not isinstance(tag, str):
        return False, "Heading tag must be a string."
    if not isinstance(heading.get("text", ""), str):
        return False, "Heading text must be a string."
    return validate_token_list(heading.get("keywords"), "heading keywords")


def validate_page_payload(payload: Any) -> tuple[bool, str]:
    """Validate the top-level shape of an analysis payload.

    Only structural problems that make the whole payload unusable are
    reported here; malformed optional lists are tolerated and dropped
    during normalisation.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not isinstance(payload, Mapping):
        return False, "Payload must be a mapping of page signals."
    ok, msg = validate_content(payload.get("content"))
    if not ok:
        return ok, msg
    title = payload.get("title")
    if title is not None and not isinstance(title, str):
        return False, "Title must be a string."
    return True, ""


def ensure_valid_payload(payload: Any) -> None:
    """Raise :class:`InvalidInputError` if *payload* fails validation."""
    ok, msg = validate_page_payload(payload)
    if not ok:
        raise InvalidInputError(msg)
