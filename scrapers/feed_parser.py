"""
Tolerant RSS/Atom extraction.

Pattern-based on purpose: real-world feeds are often not well-formed XML, so
every block and field is located with case-insensitive regexes and anything
that cannot be recovered is skipped rather than raised.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from models import CandidateArticle, FeedSource
from processing.cleaner import (
    canonicalize_asset_link,
    canonicalize_link,
    clean_text,
    normalize_date,
    truncate,
)


logger = logging.getLogger(__name__)

DEFAULT_SUMMARY_MAX_LENGTH = 420

_BLOCK_RES = (
    re.compile(r"<item\b[\s\S]*?</item>", flags=re.IGNORECASE),
    re.compile(r"<entry\b[\s\S]*?</entry>", flags=re.IGNORECASE),
)
_LINK_ELEMENT_RE = re.compile(r"<link\b[^>]*>", flags=re.IGNORECASE)
_HREF_ATTR_RE = re.compile(r"""\bhref\s*=\s*["']([^"']+)["']""", flags=re.IGNORECASE)
_REL_ATTR_RE = re.compile(r"""\brel\s*=\s*["']([^"']*)["']""", flags=re.IGNORECASE)

_LINK_TAGS = ("link", "guid")
_SUMMARY_TAGS = ("description", "content:encoded", "summary", "content")
_DATE_TAGS = ("pubDate", "dc:date", "updated")
_IMAGE_TAGS = ("media:content", "media:thumbnail", "enclosure")


def split_blocks(xml: str) -> List[str]:
    """Every `<item>` block, or `<entry>` blocks when the feed has no items."""
    text = str(xml or "")
    for pattern in _BLOCK_RES:
        blocks = pattern.findall(text)
        if blocks:
            return blocks
    return []


def extract_tag(block: str, tag: str) -> Optional[str]:
    """Inner text of the first `<tag ...>...</tag>`; None when absent or empty."""
    escaped = re.escape(tag)
    match = re.search(
        rf"<{escaped}(?:\s[^>]*)?>([\s\S]*?)</{escaped}\s*>",
        block,
        flags=re.IGNORECASE,
    )
    if not match:
        return None
    value = match.group(1).strip()
    return value or None


def extract_first(block: str, tags: Iterable[str]) -> Optional[str]:
    for tag in tags:
        value = extract_tag(block, tag)
        if value:
            return value
    return None


def extract_attribute_url(block: str, tag: str) -> Optional[str]:
    escaped = re.escape(tag)
    match = re.search(
        rf"""<{escaped}\b[^>]*\burl\s*=\s*["']([^"']+)["'][^>]*>""",
        block,
        flags=re.IGNORECASE,
    )
    return match.group(1) if match else None


def extract_image_url(block: str) -> Optional[str]:
    """media:content, then media:thumbnail, then enclosure; first usable URL wins."""
    for tag in _IMAGE_TAGS:
        normalized = canonicalize_asset_link(extract_attribute_url(block, tag))
        if normalized:
            return normalized
    return None


def extract_link_href(block: str) -> Optional[str]:
    """Atom `<link href>`: rel="alternate" (or no rel) wins over replies/self/enclosure."""
    fallback = None
    for element in _LINK_ELEMENT_RE.findall(block):
        href = _HREF_ATTR_RE.search(element)
        if not href:
            continue
        rel = _REL_ATTR_RE.search(element)
        if rel is None or rel.group(1).strip().lower() == "alternate":
            return href.group(1)
        fallback = fallback or href.group(1)
    return fallback


def _extract_link(block: str) -> Optional[str]:
    raw = extract_first(block, _LINK_TAGS)
    if raw:
        return clean_text(raw)
    return extract_link_href(block)


def parse_item(
    block: str,
    source: FeedSource,
    summary_max_length: int = DEFAULT_SUMMARY_MAX_LENGTH,
) -> Optional[CandidateArticle]:
    """Build one CandidateArticle, or None when title or link is unusable."""
    title = clean_text(extract_tag(block, "title"))
    link = canonicalize_link(_extract_link(block))
    if not title or not link:
        return None

    summary = clean_text(extract_first(block, _SUMMARY_TAGS))
    return CandidateArticle(
        id=link,
        title=title,
        link=link,
        summary=truncate(summary, summary_max_length),
        published_at=normalize_date(extract_first(block, _DATE_TAGS)),
        source=source.name,
        feed_url=source.url,
        image_url=extract_image_url(block),
    )


def parse_feed(
    xml: str,
    source: FeedSource,
    summary_max_length: int = DEFAULT_SUMMARY_MAX_LENGTH,
) -> List[CandidateArticle]:
    """Extract candidate articles from a raw feed body, skipping unusable entries."""
    blocks = split_blocks(xml)
    articles: List[CandidateArticle] = []
    for block in blocks:
        article = parse_item(block, source, summary_max_length)
        if article is not None:
            articles.append(article)

    skipped = len(blocks) - len(articles)
    if skipped:
        logger.debug(f"[{source.name}] skipped {skipped} entries without usable title/link")
    return articles
