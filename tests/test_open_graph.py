import copy
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from pelican.contents import Article, Page
from pelican.settings import DEFAULT_CONFIG
from pelican.urlwrappers import Author, Category, Tag

from open_graph.images import OpenGraphImage
from open_graph.open_graph import (
    add_author_open_graph,
    add_home_open_graph,
    add_open_graph,
    article_properties,
    author_properties,
    home_properties,
    page_properties,
    render_properties,
    site_properties,
)
from open_graph.properties import ARTICLE_NS, FB_NS, OGP_NS, PROFILE_NS

PUBLISHED = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def author():
    return SimpleNamespace(name='Eloise', url='author/eloise.html', slug='eloise')


@pytest.fixture
def article(author):
    return SimpleNamespace(
        title='Hop hop hop',
        url='blog/hop-hop-hop.html',
        metadata={},
        _content='<p>Goblin <em>hops</em> [[video:hop-hop-hop]] across the hole.</p>',
        date=PUBLISHED,
        author=author,
        category=SimpleNamespace(name='video'),
        tags=[SimpleNamespace(name='goblin'), SimpleNamespace(name='catgirl')],
        og_images={},
    )


def test_site_properties(settings):
    settings.update(OPEN_GRAPH_LOCALE='en_US', FACEBOOK_APP_ID='1234')

    assert site_properties(settings) == {
        OGP_NS + 'site_name': 'eloise.rip',
        OGP_NS + 'type': 'website',
        OGP_NS + 'locale': 'en_US',
        FB_NS + 'app_id': '1234',
    }


def test_site_properties_skip_unset_options(settings):
    assert list(site_properties(settings)) == [OGP_NS + 'site_name', OGP_NS + 'type']


def test_home_properties(settings):
    properties = home_properties(settings)

    assert properties[OGP_NS + 'title'] == 'eloise.rip'
    assert properties[OGP_NS + 'description'] == 'from the goblin hole'
    assert properties[OGP_NS + 'url'] == 'https://eloise.rip'


def test_article_properties(settings, article):
    properties = article_properties(article, settings)

    assert list(properties) == [
        OGP_NS + 'site_name',
        OGP_NS + 'type',
        OGP_NS + 'url',
        OGP_NS + 'title',
        OGP_NS + 'description',
        ARTICLE_NS + 'published_time',
        ARTICLE_NS + 'modified_time',
        ARTICLE_NS + 'author',
        ARTICLE_NS + 'section',
        ARTICLE_NS + 'tag',
    ]
    assert properties[OGP_NS + 'type'] == 'article'
    assert properties[OGP_NS + 'url'] == 'https://eloise.rip/blog/hop-hop-hop.html'
    assert properties[OGP_NS + 'description'] == 'Goblin hops across the hole.'
    assert properties[ARTICLE_NS + 'published_time'] == '2024-05-01T12:00:00+00:00'
    assert properties[ARTICLE_NS + 'modified_time'] == '2024-05-01T12:00:00+00:00'
    assert properties[ARTICLE_NS + 'author'] == 'https://eloise.rip/author/eloise.html'
    assert properties[ARTICLE_NS + 'section'] == 'video'
    assert properties[ARTICLE_NS + 'tag'] == ['goblin', 'catgirl']


def test_article_properties_prefers_summary_and_modified(settings, article):
    article.metadata = {'summary': '<p>Short <b>summary</b>.</p>'}
    article.modified = datetime(2024, 6, 2, 8, 30, tzinfo=timezone.utc)

    properties = article_properties(article, settings)

    assert properties[OGP_NS + 'description'] == 'Short summary.'
    assert properties[ARTICLE_NS + 'modified_time'] == '2024-06-02T08:30:00+00:00'


def test_article_description_length_setting(settings, article):
    settings.update(OPEN_GRAPH_EXCERPT_LENGTH=2, OPEN_GRAPH_EXCERPT_MORE='...')

    assert article_properties(article, settings)[OGP_NS + 'description'] == 'Goblin hops...'


def test_article_description_marker_setting_falls_back(settings, article):
    article._content = ' '.join(f'w{i}' for i in range(60))
    settings['OPEN_GRAPH_EXCERPT_MORE'] = None

    description = article_properties(article, settings)[OGP_NS + 'description']

    assert description == ' '.join(f'w{i}' for i in range(55)) + '…'


def test_default_category_is_not_a_section(settings, article):
    article.category = SimpleNamespace(name='misc')
    article.tags = []

    properties = article_properties(article, settings)

    assert ARTICLE_NS + 'section' not in properties
    assert ARTICLE_NS + 'tag' not in properties


def test_protected_article_only_gets_site_properties(settings, article):
    article.metadata = {'password': 'goblin'}

    assert article_properties(article, settings) == site_properties(settings)


def test_fb_admins_requires_comments(settings, article):
    settings['OPEN_GRAPH_AUTHORS'] = {'Eloise': {'facebook_id': '42'}}

    assert FB_NS + 'admins' not in article_properties(article, settings)

    settings['FACEBOOK_COMMENTS'] = True
    assert article_properties(article, settings)[FB_NS + 'admins'] == '42'


def test_article_images_are_listed(settings, article):
    url = 'https://eloise.rip/media/images/cover.jpg'
    article.og_images = {url: OpenGraphImage(url, 1200, 630)}

    properties = article_properties(article, settings)

    assert properties[OGP_NS + 'image'] == [{'url': url, 'width': 1200, 'height': 630}]
    assert list(properties)[-1] == OGP_NS + 'image'


def test_page_properties(settings):
    page = SimpleNamespace(title='About', url='about.html')

    properties = page_properties(page, settings)

    assert properties[OGP_NS + 'type'] == 'article'
    assert properties[OGP_NS + 'title'] == 'About'
    assert properties[OGP_NS + 'url'] == 'https://eloise.rip/about.html'


def test_author_properties(settings, author):
    settings['OPEN_GRAPH_AUTHORS'] = {'Eloise': {
        'first_name': 'Eloise',
        'last_name': 'Goblin',
        'description': '<p>Lives in a hole.</p>',
        'profile_id': 'abc123',
    }}

    properties = author_properties(author, settings)

    assert properties[OGP_NS + 'type'] == 'profile'
    assert properties[OGP_NS + 'title'] == 'Eloise'
    assert properties[OGP_NS + 'url'] == 'https://eloise.rip/author/eloise.html'
    assert properties[PROFILE_NS + 'first_name'] == 'Eloise'
    assert properties[PROFILE_NS + 'last_name'] == 'Goblin'
    assert properties[OGP_NS + 'description'] == 'Lives in a hole.'
    assert properties[FB_NS + 'profile_id'] == 'abc123'
    assert PROFILE_NS + 'username' not in properties


def test_author_username_on_multi_author_sites(settings, author):
    properties = author_properties(author, settings, multi_author=True)

    assert properties[PROFILE_NS + 'username'] == 'eloise'


def test_render_properties_prefixes_by_default(settings, article):
    html = render_properties(article_properties(article, settings), article, settings)

    lines = html.splitlines()
    assert lines[0] == '<meta property="og:site_name" content="eloise.rip">'
    assert '<meta property="og:type" content="article">' in lines
    assert lines[-2:] == [
        '<meta property="article:tag" content="goblin">',
        '<meta property="article:tag" content="catgirl">',
    ]


def test_render_properties_options(settings):
    settings.update(OPEN_GRAPH_PREFIXED=False, OPEN_GRAPH_HTML5=False)

    html = render_properties({OGP_NS + 'title': 'Home'}, None, settings)

    assert html == '<meta property="http://ogp.me/ns#title" content="Home" />'


def test_render_properties_callback(settings):
    def callback(properties, instance):
        properties = dict(properties)
        properties['http://ogp.me/ns#title'] = f'{instance.title}!'
        properties['twitter:card'] = 'summary'
        return properties

    settings['OPEN_GRAPH_CALLBACK'] = callback
    html = render_properties({OGP_NS + 'title': 'Home'}, SimpleNamespace(title='Hop'), settings)

    assert html.splitlines() == [
        '<meta property="og:title" content="Hop!">',
        '<meta property="twitter:card" content="summary">',
    ]


def test_render_properties_app_namespace(settings):
    settings.update(FACEBOOK_APP_NAMESPACE='goblinhole')

    html = render_properties({'http://ogp.me/ns/fb/goblinhole#hole': 'deep'}, None, settings)

    assert html == '<meta property="goblinhole:hole" content="deep">'


def test_add_author_open_graph(settings):
    eloise = SimpleNamespace(name='Eloise', url='author/eloise.html', slug='eloise')
    goblin = SimpleNamespace(name='Goblin', url='author/goblin.html', slug='goblin')
    generator = SimpleNamespace(settings=settings, authors=[(eloise, []), (goblin, [])])

    add_author_open_graph(generator)

    assert '<meta property="og:type" content="profile">' in eloise.open_graph
    assert '<meta property="profile:username" content="goblin">' in goblin.open_graph


def test_add_home_open_graph(settings):
    generator = SimpleNamespace(settings=settings, env=SimpleNamespace(globals={}))

    add_home_open_graph(generator)

    assert '<meta property="og:url" content="https://eloise.rip">' in generator.env.globals['OPEN_GRAPH_HOME']


def test_add_open_graph_ignores_other_content():
    static = SimpleNamespace(settings={}, _content='[[carousel:a.jpg]]')

    add_open_graph(static)

    assert not hasattr(static, 'open_graph')
    assert static._content == '[[carousel:a.jpg]]'


@pytest.fixture
def pelican_settings(settings):
    pelican_settings = copy.deepcopy(DEFAULT_CONFIG)
    pelican_settings.update(settings)
    pelican_settings.update(ARTICLE_URL='blog/{slug}.html', PAGE_URL='{slug}.html', TIMEZONE='UTC')
    return pelican_settings


def test_pelican_article_end_to_end(pelican_settings, make_image, content_dir):
    make_image('media/images/cover.jpg', (1200, 630))
    content = '<p>Goblin hops.</p>\n<p>[[carousel:media/images/cover.jpg|Cover]]</p>'
    article = Article(
        content,
        metadata={
            'title': 'Hop hop hop',
            'date': PUBLISHED,
            'author': Author('Eloise', pelican_settings),
            'category': Category('video', pelican_settings),
            'tags': [Tag('goblin', pelican_settings)],
        },
        settings=pelican_settings,
        source_path=str(content_dir / 'articles' / 'hop.md'),
    )

    add_open_graph(article)

    assert '<meta property="og:url" content="https://eloise.rip/blog/hop-hop-hop.html">' in article.open_graph
    assert '<meta property="article:section" content="video">' in article.open_graph
    assert '<meta property="article:tag" content="goblin">' in article.open_graph
    assert (
        '<meta property="og:image" content="https://eloise.rip/media/images/cover.jpg">\n'
        '<meta property="og:image:width" content="1200">\n'
        '<meta property="og:image:height" content="630">'
    ) in article.open_graph
    assert '[[carousel:' not in article._content
    assert 'src="/media/images/cover.jpg"' in article._content


def test_pelican_page_end_to_end(pelican_settings, content_dir):
    page = Page(
        '<p>About me.</p>',
        metadata={'title': 'About'},
        settings=pelican_settings,
        source_path=str(content_dir / 'pages' / 'about.md'),
    )

    add_open_graph(page)

    assert '<meta property="og:title" content="About">' in page.open_graph
    assert '<meta property="og:url" content="https://eloise.rip/about.html">' in page.open_graph


def test_gallery_markers_in_summary_are_expanded(pelican_settings, content_dir):
    page = Page(
        '<p>About me.</p>',
        metadata={'title': 'About'},
        settings=pelican_settings,
        source_path=str(content_dir / 'pages' / 'about.md'),
    )
    page._summary = '<p>[[carousel:media/images/me.jpg|Me]]</p>'

    add_open_graph(page)

    assert '[[carousel:' not in page._summary
    assert 'src="/media/images/me.jpg"' in page._summary
    assert page._content == '<p>About me.</p>'
