"""Rewrite full IRI property names as CURIEs (``og:title`` instead of
``http://ogp.me/ns#title``).

The prefixes are expected to be declared on a parent element of the
``<meta>`` group, e.g. ``<head prefix="og: http://ogp.me/ns#">``.
"""
from __future__ import annotations

import re
from typing import Dict, List, Mapping, Optional, Tuple

from .properties import ARTICLE_NS, BOOK_NS, FB_NS, MUSIC_NS, OGP_NS, PROFILE_NS, VIDEO_NS

DEFAULT_CURIES: Dict[str, str] = {
    OGP_NS: 'og',
    FB_NS: 'fb',
    ARTICLE_NS: 'article',
    PROFILE_NS: 'profile',
    BOOK_NS: 'book',
    MUSIC_NS: 'music',
    VIDEO_NS: 'video',
}

APP_NAMESPACE_PATTERN = re.compile(r'^[a-z0-9_-]+$')


def app_namespace_iri(namespace: Optional[str]) -> Optional[str]:
    if not namespace or not APP_NAMESPACE_PATTERN.match(namespace):
        return None
    return f'http://ogp.me/ns/fb/{namespace}#'


def curie_mappings(
    extra: Optional[Mapping[str, str]] = None,
    app_namespace: Optional[str] = None,
) -> List[Tuple[str, str]]:
    """Return ``(iri, prefix)`` candidates, longest IRI first.

    Extensions may override a default prefix. The application namespace is
    only added when its IRI is not mapped already.
    """
    curies = dict(DEFAULT_CURIES)
    if isinstance(extra, Mapping):
        curies.update(extra)
    app_iri = app_namespace_iri(app_namespace)
    if app_iri and app_iri not in curies:
        curies[app_iri] = app_namespace

    candidates = [
        (iri, prefix) for iri, prefix in curies.items()
        if isinstance(iri, str) and isinstance(prefix, str) and iri and prefix
    ]
    # stable sort: equal lengths keep declaration order
    candidates.sort(key=lambda candidate: len(candidate[0]), reverse=True)
    return candidates


def prefixed_properties(
    properties: Mapping[str, object],
    curies: Optional[List[Tuple[str, str]]] = None,
) -> Dict[str, object]:
    """Return *properties* with mapped IRIs replaced by their prefix.

    Unmapped keys pass through untouched and values are never modified.
    """
    if not isinstance(properties, Mapping) or not properties:
        return {}
    if curies is None:
        curies = curie_mappings()

    prefixed: Dict[str, object] = {}
    for property, value in properties.items():
        key = property
        for iri, prefix in curies if isinstance(property, str) else ():
            if len(property) > len(iri) and property.startswith(iri):
                key = f'{prefix}:{property[len(iri):]}'
                break
        prefixed[key] = value
    return prefixed
