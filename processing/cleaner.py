"""Text cleaning, link canonicalization and date normalization for feed entries."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
import html as html_lib
import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit


_CDATA_OPEN_RE = re.compile(r"^<!\[CDATA\[", flags=re.IGNORECASE)
_CDATA_CLOSE_RE = re.compile(r"\]\]>$")
_HTML_TAG_RE = re.compile(r"<[^>]+>")
_UNESCAPED_TAG_RE = re.compile(r"</?[A-Za-z][^<>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_ELLIPSIS = "..."


def clean_text(value: Optional[str]) -> str:
    """Strip CDATA wrappers and tags, unescape entities, collapse whitespace."""
    if not value:
        return ""
    text = str(value).strip()
    text = _CDATA_OPEN_RE.sub("", text)
    text = _CDATA_CLOSE_RE.sub("", text)
    text = _HTML_TAG_RE.sub(" ", text)
    text = html_lib.unescape(text)
    # escaped markup (&lt;p&gt;) only becomes a tag after unescaping;
    # a bare "<" or ">" in prose is kept
    text = _UNESCAPED_TAG_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def truncate(value: str, max_length: int) -> str:
    if len(value) <= max_length:
        return value
    keep = max(0, max_length - len(_ELLIPSIS))
    return f"{value[:keep]}{_ELLIPSIS}"


def canonicalize_link(link: Optional[str]) -> Optional[str]:
    """
    Canonical form used as the dedup key.

    Fragment removed, scheme and host lowercased, empty path becomes "/".
    Returns None for anything that is not an absolute http(s) URL.
    """
    text = str(link or "").strip()
    if not text:
        return None
    try:
        parts = urlsplit(text)
    except ValueError:
        return None

    scheme = parts.scheme.lower()
    if scheme not in {"http", "https"} or not parts.netloc or " " in parts.netloc:
        return None

    path = parts.path or "/"
    return urlunsplit((scheme, parts.netloc.lower(), path, parts.query, ""))


def canonicalize_asset_link(link: Optional[str]) -> Optional[str]:
    """Image URLs come straight out of attributes, so `&amp;` is still encoded."""
    text = re.sub(r"&amp;", "&", str(link or ""), flags=re.IGNORECASE)
    return canonicalize_link(text)


def parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    """Parse RFC 822 (pubDate) or ISO-8601 (dc:date, updated); None when unparseable."""
    text = clean_text(raw)
    if not text:
        return None

    parsed: Optional[datetime] = None
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        parsed = None

    if parsed is None:
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_date(raw: Optional[str]) -> Optional[str]:
    parsed = parse_timestamp(raw)
    return to_iso(parsed) if parsed else None
