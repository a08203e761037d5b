"""Pick the images advertised as ``og:image`` for an article.

Sources are tried in order: the featured image from metadata, images in the
article body, then gallery markers. The first ``MAX_IMAGE_COUNT`` distinct
URLs whose known edges are at least ``MIN_IMAGE_DIMENSION`` pixels win.
"""
from __future__ import annotations

from dataclasses import dataclass
from html import unescape
import logging
import re
from typing import Dict, Iterable, Mapping, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from . import gallery
from .media import absolute_url, probe_dimensions

logger = logging.getLogger(__name__)

MIN_IMAGE_DIMENSION = 200
# Facebook offers a choice of three images when a link is shared. Other
# consumers may index more; raise this to trade build time for coverage.
MAX_IMAGE_COUNT = 3

IMG_PATTERN = re.compile(r'<img[^>]+>', re.IGNORECASE)
IMG_ATTRIBUTE_PATTERN = re.compile(r'(src|width|height)="([^"]*)"', re.IGNORECASE)
LEADING_INTEGER = re.compile(r'\s*[+-]?(\d+)')


@dataclass
class OpenGraphImage:
    url: str
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def acceptable(self) -> bool:
        for edge in (self.width, self.height):
            if edge is not None and edge < MIN_IMAGE_DIMENSION:
                return False
        return True

    def as_property(self) -> Dict[str, object]:
        prop: Dict[str, object] = {'url': self.url}
        if self.width:
            prop['width'] = self.width
        if self.height:
            prop['height'] = self.height
        return prop


def absint(value) -> int:
    """Absolute integer value of the leading digits of *value*, else 0."""
    if isinstance(value, int):
        return abs(value)
    match = LEADING_INTEGER.match(str(value or ''))
    return int(match.group(1)) if match else 0


def valid_image_url(src: str) -> Optional[str]:
    url = unescape(src or '').strip()
    if not url:
        return None
    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        return None
    return url


def to_og_image(url: str, width=None, height=None) -> Optional[OpenGraphImage]:
    """Build an image descriptor, or ``None`` when it fails the size policy."""
    if not url:
        return None
    image = OpenGraphImage(url, absint(width) or None, absint(height) or None)
    if not image.acceptable:
        logger.debug('Skipping %s: %sx%s is below %spx', url, image.width, image.height, MIN_IMAGE_DIMENSION)
        return None
    return image


def _add(images: Dict[str, OpenGraphImage], image: Optional[OpenGraphImage], max_count: int) -> bool:
    """Record *image* unless seen. Returns True once *images* is full."""
    if image is not None and image.url not in images:
        images[image.url] = image
    return len(images) >= max_count


def gallery_images(
    fragments: Iterable[str],
    existing_images: Optional[Mapping[str, OpenGraphImage]] = None,
    max_count: int = MAX_IMAGE_COUNT,
) -> Dict[str, OpenGraphImage]:
    """Scrape ``<img>`` elements out of rendered gallery HTML.

    Deprecated compatibility path for sites whose galleries can only be read
    as rendered markup. It relies on the gallery HTML keeping double-quoted
    ``src``/``width``/``height`` attributes on a single ``<img>`` tag and is
    not an HTML parser; anything else is silently missed.
    """
    images: Dict[str, OpenGraphImage] = dict(existing_images) if isinstance(existing_images, Mapping) else {}
    if len(images) >= max_count:
        return images
    if not isinstance(fragments, Iterable) or isinstance(fragments, (str, bytes)):
        return images

    for fragment in fragments:
        if not isinstance(fragment, str) or '<img' not in fragment.lower():
            continue
        for tag in IMG_PATTERN.findall(fragment):
            src = None
            dimensions: Dict[str, int] = {}
            for name, value in IMG_ATTRIBUTE_PATTERN.findall(tag):
                name = name.lower()
                if name == 'src':
                    src = valid_image_url(value) or src
                else:
                    pixels = absint(value)
                    if pixels > 0:
                        dimensions[name] = pixels
            if not src or src in images:
                continue
            image = OpenGraphImage(src, dimensions.get('width'), dimensions.get('height'))
            if not image.acceptable:
                logger.debug('Skipping gallery image %s: below %spx', src, MIN_IMAGE_DIMENSION)
                continue
            if _add(images, image, max_count):
                return images
    return images


def featured_image(instance, settings) -> Optional[OpenGraphImage]:
    metadata = getattr(instance, 'metadata', None) or {}
    path = metadata.get('og_image') or metadata.get('image')
    if not path or not isinstance(path, str):
        return None
    width, height = probe_dimensions(path, settings, instance)
    return to_og_image(absolute_url(path, settings.get('SITEURL', '')), width, height)


def content_images(content: str, settings, instance=None) -> Iterable[OpenGraphImage]:
    if not content or '<img' not in content.lower():
        return
    siteurl = settings.get('SITEURL', '')
    soup = BeautifulSoup(content, 'html.parser')
    for img in soup.find_all('img', src=True):
        width, height = absint(img.get('width')), absint(img.get('height'))
        if not (width and height):
            probed_width, probed_height = probe_dimensions(img['src'], settings, instance)
            width = width or probed_width
            height = height or probed_height
        image = to_og_image(absolute_url(img['src'], siteurl), width, height)
        if image is not None:
            yield image


def structured_gallery_images(content: str, settings, instance=None) -> Iterable[OpenGraphImage]:
    siteurl = settings.get('SITEURL', '')
    for found in gallery.find_galleries(content, settings, instance):
        for item in found.items:
            image = to_og_image(absolute_url(item.src, siteurl), item.width, item.height)
            if image is not None:
                yield image


def get_og_images(instance, settings, max_count: int = MAX_IMAGE_COUNT) -> Dict[str, OpenGraphImage]:
    """Collect up to *max_count* images for *instance*, keyed by URL."""
    images: Dict[str, OpenGraphImage] = {}
    if instance is None:
        return images

    if _add(images, featured_image(instance, settings), max_count):
        return images

    content = getattr(instance, '_content', None) or ''
    for image in content_images(content, settings, instance):
        if _add(images, image, max_count):
            return images

    if settings.get('OPEN_GRAPH_LEGACY_GALLERIES', False):
        siteurl = settings.get('SITEURL', '')
        fragments = (
            gallery.expand_gallery(found, siteurl, settings)
            for found in gallery.find_galleries(content, settings, instance)
        )
        return gallery_images(fragments, images, max_count)

    for image in structured_gallery_images(content, settings, instance):
        if _add(images, image, max_count):
            return images
    return images
