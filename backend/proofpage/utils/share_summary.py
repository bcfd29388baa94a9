"""
Plain-text share summary for copy/paste into proposals and DMs.

The output is a newline-joined block: an optional name/headline line, an
optional short bio, up to two proof metrics, an optional featured
testimonial and always the "View full proof" footer. Blocks are separated
by a single blank line.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

BIO_MAX_LENGTH = 140
QUOTE_MAX_LENGTH = 160
MAX_METRICS = 2
ELLIPSIS = "…"

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_WHITESPACE_RE = re.compile(r"\s+")
_QUOTE_CHARS = "\"“”„‟"
_QUOTE_RUN_RE = re.compile(f"[{_QUOTE_CHARS}]{{2,}}")
_EDGE_CHARS = _QUOTE_CHARS + " \t\r\n\f\v"


@dataclass(frozen=True)
class SummaryTestimonial:
    quote: str
    name: str
    role_company: Optional[str] = None


def looks_like_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))


def shorten(value: str, max_length: int) -> str:
    text = _WHITESPACE_RE.sub(" ", value.strip())
    if len(text) <= max_length:
        return text
    return f"{text[:max_length - 1].rstrip()}{ELLIPSIS}"


def normalize_quote(quote: str) -> str:
    """
    Collapse whitespace and doubled quote marks, drop wrapping quotes,
    then shorten to the quote limit.

    >>> normalize_quote('""Great partner to work with""')
    'Great partner to work with'
    """
    text = _WHITESPACE_RE.sub(" ", quote.strip())
    text = _QUOTE_RUN_RE.sub('"', text)
    text = text.strip(_EDGE_CHARS)
    return shorten(text, QUOTE_MAX_LENGTH)


def _title_line(title: str, headline: Optional[str]) -> Optional[str]:
    name = title.strip()
    if looks_like_email(name):
        name = ""
    clean_headline = (headline or "").strip()

    if name and clean_headline:
        return f"{name} — {clean_headline}"
    return name or clean_headline or None


def build_share_summary(
    title: str,
    share_url: str,
    *,
    headline: Optional[str] = None,
    bio: Optional[str] = None,
    work_example_metrics: Iterable[str] = (),
    testimonial: Optional[SummaryTestimonial] = None,
) -> str:
    blocks: List[List[str]] = []

    title_line = _title_line(title or "", headline)
    if title_line:
        blocks.append([title_line])

    clean_bio = (bio or "").strip()
    if clean_bio and len(clean_bio) <= BIO_MAX_LENGTH:
        blocks.append([clean_bio])

    metrics = [m.strip() for m in work_example_metrics if m and m.strip()][:MAX_METRICS]
    if metrics:
        blocks.append(["Proof:"] + [f"• {metric}" for metric in metrics])

    if testimonial and testimonial.quote.strip() and testimonial.name.strip():
        name = testimonial.name.strip()
        role_company = (testimonial.role_company or "").strip()
        byline = f"{name}, {role_company}" if role_company else name
        blocks.append([
            "Featured testimonial:",
            f'"{normalize_quote(testimonial.quote)}"',
            f"— {byline}",
        ])

    blocks.append(["View full proof:", share_url])

    lines: List[str] = []
    for block in blocks:
        if lines:
            lines.append("")
        lines.extend(block)
    return "\n".join(lines)
