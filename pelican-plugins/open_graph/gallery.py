"""Image galleries written as lightweight content markers.

Usage in Markdown::

    [[carousel:label=Catgirl and Goblin photo set;
                media/images/tw-catgirl-and-goblin (1).jpg|Catgirl at the Time Warp machine.;
                media/images/tw-catgirl-and-goblin (2).jpg|Goblin queues up a flip.]]

Each entry after the optional ``label=`` is a ``path|caption`` pair separated
by semicolons. Captions double as ``alt`` text.

``find_galleries`` reads markers into ``Gallery`` objects, the structured
view the Open Graph image collector prefers. ``expand_gallery`` renders one
gallery as HTML; it always links the original upload, never a resized
variant. Class names are configurable::

    CAROUSEL_CONTAINER_CLASS = 'carousel-gallery'
    CAROUSEL_SCROLLER_CLASS = 'carousel-scroller'
    CAROUSEL_ITEM_CLASS = 'carousel-item'
"""
from __future__ import annotations

from dataclasses import dataclass, field
from html import escape
import re
from typing import List, Optional

from .media import absolute_url, normalise_path, probe_dimensions

CAROUSEL_PATTERN = re.compile(
    r"(?:(?P<prefix><p[^>]*>)\s*)?\[\[carousel:(?P<spec>.*?)]]\s*(?(prefix)</p>)",
    re.IGNORECASE | re.DOTALL,
)

DEFAULT_LABEL = 'Image carousel'


@dataclass
class GalleryItem:
    src: str
    caption: str = ''
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def alt(self) -> str:
        return self.caption or self.src.rsplit('/', 1)[-1]


@dataclass
class Gallery:
    label: str = DEFAULT_LABEL
    items: List[GalleryItem] = field(default_factory=list)


def parse_gallery(spec: str, settings=None, instance=None) -> Gallery:
    gallery = Gallery()
    for raw in spec.split(';'):
        entry = raw.strip()
        if not entry:
            continue
        if entry.lower().startswith('label='):
            gallery.label = entry.split('=', 1)[1].strip() or gallery.label
            continue
        path_part, _, caption_part = entry.partition('|')
        path = normalise_path(path_part)
        if not path:
            continue
        width = height = None
        if settings is not None:
            width, height = probe_dimensions(path_part, settings, instance)
        gallery.items.append(GalleryItem(path, caption_part.strip(), width, height))
    return gallery


def find_galleries(text: str, settings=None, instance=None) -> List[Gallery]:
    if not text:
        return []
    return [
        parse_gallery(match.group('spec'), settings, instance)
        for match in CAROUSEL_PATTERN.finditer(text)
    ]


def expand_gallery(gallery: Gallery, siteurl: str = '', settings=None) -> str:
    settings = settings or {}
    container_class = settings.get('CAROUSEL_CONTAINER_CLASS', 'carousel-gallery')
    scroller_class = settings.get('CAROUSEL_SCROLLER_CLASS', 'carousel-scroller')
    item_class = settings.get('CAROUSEL_ITEM_CLASS', 'carousel-item')

    lines = [f'<div class="{container_class}" role="group" aria-label="{escape(gallery.label)}">']
    lines.append(f'  <div class="{scroller_class}" tabindex="0">')
    for item in gallery.items:
        src = absolute_url(item.src, siteurl) if siteurl else item.src
        width_attr = f' width="{item.width}"' if item.width else ''
        height_attr = f' height="{item.height}"' if item.height else ''
        lines.append(f'    <figure class="{item_class}">')
        lines.append(
            f'      <img src="{escape(src)}" alt="{escape(item.alt)}" loading="lazy"{width_attr}{height_attr}>'
        )
        if item.caption:
            lines.append(f'      <figcaption>{escape(item.caption)}</figcaption>')
        lines.append('    </figure>')
    lines.append('  </div>')
    lines.append('</div>')
    return '\n'.join(lines)


def expand_galleries(text: str, siteurl: str = '', settings=None, instance=None) -> str:
    """Replace every gallery marker in *text* with its HTML."""

    def _repl(match: re.Match) -> str:
        gallery = parse_gallery(match.group('spec'), settings, instance)
        if not gallery.items:
            return ''
        return expand_gallery(gallery, siteurl, settings)

    return CAROUSEL_PATTERN.sub(_repl, text)
