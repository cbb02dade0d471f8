"""Handle normalization and local format validation."""

import re

# ASCII letters, digits and underscore, as Twitter allows
_HANDLE_PATTERN = re.compile(r"\w+", re.ASCII)

INVALID_HANDLE_MESSAGE = (
    "Invalid Twitter handle format. Use only letters, numbers, and underscores."
)


def normalize_handle(handle: str) -> str:
    """Strip a single leading '@' ("@jack" -> "jack")."""
    return handle[1:] if handle.startswith("@") else handle


def is_valid_handle(handle: str) -> bool:
    """Check a handle locally, without any network call."""
    return _HANDLE_PATTERN.fullmatch(normalize_handle(handle)) is not None


def display_handle(handle: str) -> str:
    """Canonical stored form of a handle ("jack" -> "@jack")."""
    return f"@{normalize_handle(handle)}"
