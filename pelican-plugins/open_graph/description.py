from __future__ import annotations

import re

from bs4 import BeautifulSoup

DEFAULT_EXCERPT_LENGTH = 55
DEFAULT_EXCERPT_MORE = '…'

# [[video:...]], [[carousel:...]] and any other content marker
MARKER_PATTERN = re.compile(r'\[\[[a-z_-]+:.*?]]', re.IGNORECASE | re.DOTALL)


def strip_markers(text: str) -> str:
    return MARKER_PATTERN.sub('', text)


def strip_tags(text: str) -> str:
    soup = BeautifulSoup(text, 'html.parser')
    for tag in soup(['script', 'style']):
        tag.decompose()
    return soup.get_text().strip()


def clean_description(
    text: str,
    trimmed: bool = True,
    length: int = DEFAULT_EXCERPT_LENGTH,
    more: str = DEFAULT_EXCERPT_MORE,
) -> str:
    """Turn article markup into plain description text.

    Content markers and tags are removed. With *trimmed* the result is cut to
    *length* words and *more* is appended when anything was cut.
    """
    text = (text or '').strip()
    if not text:
        return ''

    text = strip_markers(text).strip()
    if not text:
        return ''

    text = strip_tags(text)
    if trimmed:
        words = text.split()
        if len(words) > length:
            text = ' '.join(words[:length]) + more
        else:
            text = ' '.join(words)
    return text
