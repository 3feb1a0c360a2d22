"""Slug derivation for AI tool names."""

from __future__ import annotations

import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Return a URL-safe slug: lowercase, non-alphanumeric runs become one hyphen.

    >>> slugify("GPT-4 Turbo!!")
    'gpt-4-turbo'
    """
    return _NON_ALNUM.sub("-", name.lower()).strip("-")
