"""Flatten Open Graph property trees into RDFa ``<meta>`` elements.

A property tree maps a property name to a value. Values are scalars
(``str``/``int``), lists of values (repeated properties such as several
``og:image`` entries) or dicts (structured properties such as an image with
``url``/``width``/``height``)::

    {'og:image': [{'url': 'https://example.org/a.jpg', 'width': 640}]}

renders as::

    <meta property="og:image" content="https://example.org/a.jpg">
    <meta property="og:image:width" content="640">
"""
from __future__ import annotations

from html import escape
from typing import Any, Iterator, List, Mapping, Tuple, Union

OGP_NS = 'http://ogp.me/ns#'
FB_NS = 'http://ogp.me/ns/fb#'
ARTICLE_NS = 'http://ogp.me/ns/article#'
PROFILE_NS = 'http://ogp.me/ns/profile#'
BOOK_NS = 'http://ogp.me/ns/book#'
MUSIC_NS = 'http://ogp.me/ns/music#'
VIDEO_NS = 'http://ogp.me/ns/video#'

Scalar = Union[str, int]
Value = Union[Scalar, List[Any], Mapping[str, Any]]


def _is_positional(key) -> bool:
    if isinstance(key, str):
        return key.isdigit()
    return True


def serialize(property: str, content: Value) -> Iterator[Tuple[str, Scalar]]:
    """Yield ``(property, scalar)`` pairs for *content* in render order.

    The ``url`` member of a structured value is equivalent to the bare
    property and is always emitted first. Positional members keep the parent
    property name so repeated values share it.
    """
    if not property or not content:
        return

    if isinstance(content, Mapping):
        remaining = dict(content)
        if 'url' in remaining:
            yield from serialize(property, remaining.pop('url'))
        for key, value in remaining.items():
            if _is_positional(key):
                yield from serialize(property, value)
            else:
                yield from serialize(f'{property}:{key}', value)
    elif isinstance(content, (list, tuple)):
        for value in content:
            yield from serialize(property, value)
    else:
        yield property, content


def meta_element(property: str, content: Scalar, html5: bool = True) -> str:
    close = '>' if html5 else ' />'
    return f'<meta property="{escape(property)}" content="{escape(str(content))}"{close}'


def meta_elements(property: str, content: Value, html5: bool = True) -> List[str]:
    return [meta_element(path, value, html5) for path, value in serialize(property, content)]


def render(properties: Mapping[str, Value], html5: bool = True) -> str:
    """Render a whole property tree, one element per line."""
    if not isinstance(properties, Mapping):
        return ''
    lines: List[str] = []
    for property, content in properties.items():
        lines.extend(meta_elements(property, content, html5))
    return '\n'.join(lines)
