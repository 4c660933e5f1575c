"""Title to URL slug conversion."""

import re

_DISALLOWED = re.compile(r"[^\w\s-]", re.ASCII)
_SEPARATORS = re.compile(r"[\s_-]+", re.ASCII)


def slugify(text: str) -> str:
    """
    Lowercase, drop punctuation, collapse whitespace/underscore/hyphen runs
    to a single hyphen and trim hyphens from both ends.

    "Hello & World! 2024" -> "hello-world-2024"
    """
    slug = _DISALLOWED.sub("", text.lower().strip())
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")
