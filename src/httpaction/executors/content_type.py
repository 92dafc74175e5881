"""
content_type.py
---------------
Decides whether a response Content-Type may be surfaced as text.
"""
from typing import Dict, Tuple

ALLOWED_MEDIA_TYPES = ("application/json", "application/xml", "application/javascript")
ALLOWED_CHARSETS = ("utf-8", "us-ascii")


def parse_content_type(value: str) -> Tuple[str, Dict[str, str]]:
    """Split `type/subtype; key=value` into a lowercased media type and its params."""
    media_type, _, rest = value.partition(";")
    params = {}
    for part in rest.split(";"):
        key, sep, val = part.partition("=")
        if not sep:
            continue
        params[key.strip().lower()] = val.strip().strip('"')
    return media_type.strip().lower(), params


def is_content_type_allowed(value: str) -> bool:
    if not value:
        return False
    media_type, params = parse_content_type(value)
    if not (media_type.startswith("text/") and len(media_type) > len("text/")) \
            and media_type not in ALLOWED_MEDIA_TYPES:
        return False
    # The declared charset is checked literally; the body is never sniffed.
    charset = params.get("charset")
    if charset is not None and charset.lower() not in ALLOWED_CHARSETS:
        return False
    return True
