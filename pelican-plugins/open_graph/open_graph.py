"""Pelican plugin: Open Graph protocol ``<meta>`` elements for link previews.

Every article, page and author gets an ``open_graph`` attribute holding the
rendered elements, and templates get an ``OPEN_GRAPH_HOME`` global for the
index. Print them inside ``<head>``::

    <head prefix="og: http://ogp.me/ns# fb: http://ogp.me/ns/fb# article: http://ogp.me/ns/article#">
      {% if article %}{{ article.open_graph }}
      {% elif page %}{{ page.open_graph }}
      {% elif author %}{{ author.open_graph }}
      {% else %}{{ OPEN_GRAPH_HOME }}{% endif %}

Properties are built with full IRIs and rewritten to CURIEs at the end
unless ``OPEN_GRAPH_PREFIXED`` is False.

Configuration (optional in pelicanconf.py)::

    OPEN_GRAPH_LOCALE = 'en_US'
    FACEBOOK_APP_ID = '1234567890'
    FACEBOOK_APP_NAMESPACE = 'goblinhole'    # adds a CURIE for app objects
    FACEBOOK_COMMENTS = False                # emit fb:admins for authors
    OPEN_GRAPH_AUTHORS = {'Eloise': {'first_name': 'Eloise', 'facebook_id': '42'}}
    OPEN_GRAPH_CURIES = {'http://example.org/ns#': 'example'}
    OPEN_GRAPH_PREFIXED = True
    OPEN_GRAPH_HTML5 = True                  # False for ``<meta ... />``
    OPEN_GRAPH_EXCERPT_LENGTH = 55
    OPEN_GRAPH_EXCERPT_MORE = '…'
    OPEN_GRAPH_LEGACY_GALLERIES = False
    OPEN_GRAPH_CALLBACK = None               # callable(properties, instance) -> properties
"""
from __future__ import annotations

from datetime import datetime
import logging
from typing import Dict, Optional

from pelican import signals
from pelican.contents import Article, Page

from . import gallery
from .curie import curie_mappings, prefixed_properties
from .description import DEFAULT_EXCERPT_LENGTH, DEFAULT_EXCERPT_MORE, clean_description
from .images import get_og_images
from .properties import ARTICLE_NS, FB_NS, OGP_NS, PROFILE_NS, render

logger = logging.getLogger(__name__)


def _site_url(path: str, settings) -> str:
    siteurl = settings.get('SITEURL', '').rstrip('/')
    if not path:
        return siteurl or '/'
    if path.startswith(('http://', 'https://')):
        return path
    return f"{siteurl}/{path.lstrip('/')}"


def _author_profile(name: str, settings) -> Dict[str, str]:
    profiles = settings.get('OPEN_GRAPH_AUTHORS') or {}
    profile = profiles.get(name) if isinstance(profiles, dict) else None
    return profile if isinstance(profile, dict) else {}


def _iso_date(value) -> Optional[str]:
    if isinstance(value, datetime):
        return value.isoformat()
    return None


def _description(text: str, settings, trimmed: bool = True) -> str:
    length = settings.get('OPEN_GRAPH_EXCERPT_LENGTH', DEFAULT_EXCERPT_LENGTH)
    if not isinstance(length, int) or length < 1:
        length = DEFAULT_EXCERPT_LENGTH
    more = settings.get('OPEN_GRAPH_EXCERPT_MORE', DEFAULT_EXCERPT_MORE)
    if not isinstance(more, str):
        more = DEFAULT_EXCERPT_MORE
    return clean_description(text, trimmed=trimmed, length=length, more=more)


def site_properties(settings) -> Dict[str, object]:
    properties: Dict[str, object] = {
        OGP_NS + 'site_name': settings.get('SITENAME', ''),
        OGP_NS + 'type': 'website',
    }
    if settings.get('OPEN_GRAPH_LOCALE'):
        properties[OGP_NS + 'locale'] = settings['OPEN_GRAPH_LOCALE']
    if settings.get('FACEBOOK_APP_ID'):
        properties[FB_NS + 'app_id'] = settings['FACEBOOK_APP_ID']
    return properties


def home_properties(settings) -> Dict[str, object]:
    properties = site_properties(settings)
    properties[OGP_NS + 'title'] = settings.get('SITENAME', '')
    properties[OGP_NS + 'description'] = settings.get('SITESUBTITLE', '')
    properties[OGP_NS + 'url'] = _site_url('', settings)
    return properties


def article_properties(article, settings) -> Dict[str, object]:
    properties = site_properties(settings)
    metadata = getattr(article, 'metadata', None) or {}
    if metadata.get('password'):
        return properties

    properties[OGP_NS + 'url'] = _site_url(getattr(article, 'url', ''), settings)
    properties[OGP_NS + 'title'] = getattr(article, 'title', '')

    # an explicit description or summary beats the body text
    source = metadata.get('description') or metadata.get('summary') or getattr(article, '_content', '')
    description = _description(source or '', settings)
    if description:
        properties[OGP_NS + 'description'] = description

    properties[OGP_NS + 'type'] = 'article'
    published = _iso_date(getattr(article, 'date', None))
    if published:
        properties[ARTICLE_NS + 'published_time'] = published
        properties[ARTICLE_NS + 'modified_time'] = _iso_date(getattr(article, 'modified', None)) or published

    author = getattr(article, 'author', None)
    if author is not None and getattr(author, 'url', None):
        properties[ARTICLE_NS + 'author'] = _site_url(author.url, settings)
        facebook_id = _author_profile(author.name, settings).get('facebook_id')
        if settings.get('FACEBOOK_COMMENTS') and facebook_id:
            # fb:admins grants comment moderation to the author
            properties[FB_NS + 'admins'] = facebook_id

    category = getattr(article, 'category', None)
    default_category = settings.get('DEFAULT_CATEGORY', 'misc')
    if category is not None and getattr(category, 'name', None) and category.name != default_category:
        properties[ARTICLE_NS + 'section'] = category.name

    tags = [tag.name for tag in getattr(article, 'tags', None) or () if getattr(tag, 'name', None)]
    if tags:
        properties[ARTICLE_NS + 'tag'] = tags

    images = getattr(article, 'og_images', None)
    if images is None:
        images = get_og_images(article, settings)
    if images:
        properties[OGP_NS + 'image'] = [image.as_property() for image in images.values()]
    return properties


def page_properties(page, settings) -> Dict[str, object]:
    properties = site_properties(settings)
    properties[OGP_NS + 'type'] = 'article'
    properties[OGP_NS + 'title'] = getattr(page, 'title', '')
    properties[OGP_NS + 'url'] = _site_url(getattr(page, 'url', ''), settings)
    return properties


def author_properties(author, settings, multi_author: bool = False) -> Dict[str, object]:
    properties = site_properties(settings)
    profile = _author_profile(author.name, settings)

    properties[OGP_NS + 'type'] = 'profile'
    properties[OGP_NS + 'title'] = profile.get('display_name') or author.name
    properties[OGP_NS + 'url'] = _site_url(author.url, settings)
    properties[PROFILE_NS + 'first_name'] = profile.get('first_name', '')
    properties[PROFILE_NS + 'last_name'] = profile.get('last_name', '')

    description = _description(profile.get('description', ''), settings)
    if description:
        properties[OGP_NS + 'description'] = description
    if profile.get('profile_id'):
        properties[FB_NS + 'profile_id'] = profile['profile_id']

    # a username only tells authors apart
    if multi_author:
        properties[PROFILE_NS + 'username'] = profile.get('username') or author.slug
    return properties


def render_properties(properties: Dict[str, object], instance, settings) -> str:
    callback = settings.get('OPEN_GRAPH_CALLBACK')
    if callable(callback):
        properties = callback(properties, instance)

    if settings.get('OPEN_GRAPH_PREFIXED', True):
        curies = curie_mappings(settings.get('OPEN_GRAPH_CURIES'), settings.get('FACEBOOK_APP_NAMESPACE'))
        properties = prefixed_properties(properties, curies)

    return render(properties, html5=settings.get('OPEN_GRAPH_HTML5', True))


def add_open_graph(instance):
    if not isinstance(instance, (Article, Page)):
        return
    settings = instance.settings

    if isinstance(instance, Article):
        instance.og_images = get_og_images(instance, settings)
        properties = article_properties(instance, settings)
    else:
        properties = page_properties(instance, settings)
    instance.open_graph = render_properties(properties, instance, settings)

    for attr in ('_content', '_summary'):
        text = getattr(instance, attr, None)
        if text:
            setattr(instance, attr, gallery.expand_galleries(text, '', settings, instance))


def add_author_open_graph(article_generator):
    authors = getattr(article_generator, 'authors', [])
    settings = article_generator.settings
    for author, _articles in authors:
        properties = author_properties(author, settings, multi_author=len(authors) > 1)
        author.open_graph = render_properties(properties, author, settings)
    logger.debug('Open Graph: rendered %d author profiles', len(authors))


def add_home_open_graph(generator):
    settings = generator.settings
    generator.env.globals['OPEN_GRAPH_HOME'] = render_properties(home_properties(settings), None, settings)


def register():  # Pelican entry point
    signals.content_object_init.connect(add_open_graph)
    signals.article_generator_finalized.connect(add_author_open_graph)
    signals.generator_init.connect(add_home_open_graph)
