"""Best-effort JSON recovery for free-text model output."""

from __future__ import annotations

import json
import re
from typing import Any, List, Optional


_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*([\s\S]*?)```")
_SMART_QUOTES = str.maketrans({"“": '"', "”": '"', "‘": "'", "’": "'"})
_CLOSERS = {"{": "}", "[": "]"}
_LITERAL_FIXUPS = {"True": "true", "False": "false", "None": "null"}
_BARE_WORD_RE = re.compile(r"[A-Za-z_]+")


def _strip_fences(text: str) -> str:
    match = _FENCE_RE.search(text)
    return match.group(1).strip() if match else text


def _slice_to_json(text: str) -> str:
    """Drop prose before the first bracket and after the last matching closer."""
    starts = [idx for idx in (text.find("{"), text.find("[")) if idx >= 0]
    if not starts:
        return text
    start = min(starts)
    closer = _CLOSERS[text[start]]
    end = text.rfind(closer)
    return text[start : end + 1] if end > start else text[start:]


def _fix_structure(text: str) -> str:
    """
    Single pass outside string literals:
    trailing commas dropped, Python literals mapped to JSON,
    single-quoted strings rewritten with double quotes,
    an unterminated string and unclosed brackets closed at the end.
    """
    out: List[str] = []
    stack: List[str] = []
    quote: Optional[str] = None
    escaped = False
    idx = 0
    length = len(text)

    while idx < length:
        ch = text[idx]
        if quote:
            if escaped:
                escaped = False
                if ch == "'":
                    # \' is not a JSON escape
                    out.pop()
                out.append(ch)
            elif ch == "\\":
                escaped = True
                out.append(ch)
            elif ch == quote:
                quote = None
                out.append('"')
            elif ch == '"':
                out.append('\\"')
            elif ch == "\n":
                out.append("\\n")
            else:
                out.append(ch)
            idx += 1
            continue

        if ch in "\"'":
            quote = ch
            out.append('"')
        elif ch in _CLOSERS:
            stack.append(_CLOSERS[ch])
            out.append(ch)
        elif ch in "}]":
            while out and out[-1].isspace():
                out.pop()
            if out and out[-1] == ",":
                out.pop()
            if stack and stack[-1] == ch:
                stack.pop()
                out.append(ch)
            # stray closer with no opener is dropped
        elif _BARE_WORD_RE.match(text, idx):
            word = _BARE_WORD_RE.match(text, idx).group(0)
            out.append(_LITERAL_FIXUPS.get(word, word))
            idx += len(word)
            continue
        else:
            out.append(ch)
        idx += 1

    if quote:
        if escaped:
            out.pop()
        out.append('"')
    while out and (out[-1].isspace() or out[-1] in ",:"):
        out.pop()
    while stack:
        out.append(stack.pop())
    return "".join(out)


def _loads(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError, RecursionError):
        return None


def repair_json(raw: str) -> Any:
    """
    Parse `raw` as JSON, applying progressively more aggressive fixups.

    Raises:
        ValueError: when no candidate parses
    """
    text = str(raw or "").strip()
    if not text:
        raise ValueError("empty output")

    parsed = _loads(text)
    if parsed is not None:
        return parsed

    candidate = _slice_to_json(_strip_fences(text))
    for attempt in (
        candidate,
        _fix_structure(candidate),
        _fix_structure(candidate.translate(_SMART_QUOTES)),
    ):
        parsed = _loads(attempt)
        if parsed is not None:
            return parsed

    raise ValueError("output is not recoverable as JSON")
