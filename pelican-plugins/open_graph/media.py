"""Locate site media on disk and in the published site."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import quote, unquote

from PIL import Image

logger = logging.getLogger(__name__)

# Pelican intra-site link placeholders
LINK_PLACEHOLDERS = ('{static}', '{attach}', '{filename}', '|static|', '|attach|', '|filename|')


def _strip_placeholder(path: str) -> str:
    for placeholder in LINK_PLACEHOLDERS:
        if path.startswith(placeholder):
            return path[len(placeholder):]
    return path


def normalise_path(raw_path: str) -> str:
    """Return a site-root relative, percent-quoted path (or the URL untouched)."""
    path = _strip_placeholder(raw_path.strip())
    if not path:
        return ''
    if path.startswith(('http://', 'https://', '//')):
        return path
    while path.startswith('../'):
        path = path[len('../'):]
    if path.startswith('./'):
        path = path[len('./'):]
    if path.startswith('images/'):
        path = f'media/{path}'
    return quote(path if path.startswith('/') else f'/{path}', safe='/:%')


def absolute_url(raw_path: str, siteurl: str) -> str:
    path = normalise_path(raw_path)
    if not path:
        return ''
    if path.startswith('//'):
        return f'https:{path}'
    if path.startswith(('http://', 'https://')):
        return path
    return f"{siteurl.rstrip('/')}{path}"


def resolve_image_path(raw_path: str, settings, instance=None) -> Optional[Path]:
    path = unquote(_strip_placeholder(raw_path.strip()))
    if not path or path.startswith(('http://', 'https://', '//')):
        return None

    base_content = Path(settings.get('PATH', 'content'))
    candidates: List[Path] = []

    source_path = getattr(instance, 'source_path', None)
    if not path.startswith('/') and source_path:
        candidates.append(Path(source_path).parent.joinpath(path).resolve())

    trimmed = path.lstrip('/')
    candidates.append(base_content / trimmed)
    if not trimmed.startswith('media/'):
        candidates.append(base_content / 'media' / trimmed)

    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def probe_dimensions(raw_path: str, settings, instance=None) -> Tuple[Optional[int], Optional[int]]:
    """Read pixel dimensions of a local image, ``(None, None)`` when unknown."""
    local_path = resolve_image_path(raw_path, settings, instance)
    if not local_path:
        return None, None
    try:
        with Image.open(local_path) as image:
            width, height = image.size
            return int(width), int(height)
    except OSError as err:
        logger.warning('Could not read image dimensions of %s: %s', local_path, err)
        return None, None
