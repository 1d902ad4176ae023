"""Sanitizing helpers for storage keys and user-facing error messages."""

from __future__ import annotations

import os
import re


def sanitize_key(key: str) -> str:
    """Turn a company name or session id into a safe file stem."""
    slug = re.sub(r"[^a-z0-9]+", "-", (key or "").lower()).strip("-")
    return slug or "default"


def sanitize_error(message: str) -> str:
    """Redact the user's home directory from error messages."""
    if not message:
        return message

    home = os.environ.get("USERPROFILE") or os.environ.get("HOME") or ""
    if home and home != os.sep:
        return message.replace(home, "[USER_HOME]")
    return message
