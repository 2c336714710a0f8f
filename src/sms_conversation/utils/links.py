"""Link detection for message bodies."""

from __future__ import annotations

import re
from html import escape

# URL regex pattern
URL_PATTERN = re.compile(
    r'https?://[^\s<>"{}|\\^`\[\]]+'
    r'|www\d{0,3}\.[^\s<>"{}|\\^`\[\]]+'
)

# Trailing punctuation that usually ends a sentence, not a URL
_TRAILING = ".,;:!?'\")"


def find_urls(text: str) -> list[tuple[int, int, str]]:
    """
    Find all URLs in text.

    Returns list of (start, end, url) tuples. The url has a scheme added
    when the text only had "www.".
    """
    results = []
    for match in URL_PATTERN.finditer(text):
        end = match.end()
        url = match.group()
        while url and url[-1] in _TRAILING:
            # Keep balanced parentheses, e.g. wiki links
            if url[-1] == ")" and url.count("(") >= url.count(")"):
                break
            url = url[:-1]
            end -= 1
        if not url:
            continue
        href = url if "://" in url else "http://" + url
        results.append((match.start(), end, href))
    return results


def linkify(text: str) -> str:
    """Escape a message body for markup and wrap its URLs in anchors."""
    parts: list[str] = []
    last = 0
    for start, end, href in find_urls(text):
        parts.append(escape(text[last:start], quote=False))
        parts.append(f'<a href="{escape(href)}">{escape(text[start:end], quote=False)}</a>')
        last = end
    parts.append(escape(text[last:], quote=False))
    return "".join(parts)
