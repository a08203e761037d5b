# --- Site Information ---
SITENAME = 'eloise.rip'
SITEURL = 'https://eloise.rip'
SITESUBTITLE = 'from the goblin hole 🕳'
AUTHOR = 'Eloise'

# --- Paths ---
PATH = 'content'
ARTICLE_PATHS = ['articles']
PAGE_PATHS = ['pages']
STATIC_PATHS = ['media', 'extra']

# --- Content Settings ---
TIMEZONE = 'UTC'
DEFAULT_LANG = 'en'
DEFAULT_CATEGORY = 'misc'
ARTICLE_SAVE_AS = 'blog/{slug}.html'
ARTICLE_URL = 'blog/{slug}.html'
PAGE_SAVE_AS = '{slug}.html'
PAGE_URL = '{slug}.html'
AUTHOR_SAVE_AS = 'author/{slug}.html'
AUTHOR_URL = 'author/{slug}.html'

# --- Plugins ---
PLUGIN_PATHS = ['pelican-plugins']
PLUGINS = ['open_graph']

# --- Open Graph ---
# Link previews need absolute URLs, so og:url and og:image always use SITEURL.
OPEN_GRAPH_LOCALE = 'en_US'
FACEBOOK_APP_ID = ''
FACEBOOK_APP_NAMESPACE = ''
FACEBOOK_COMMENTS = False
OPEN_GRAPH_AUTHORS = {
    'Eloise': {
        'first_name': 'Eloise',
        'description': 'Goblin, catgirl, occasional video editor.',
    },
}
OPEN_GRAPH_EXCERPT_LENGTH = 55
OPEN_GRAPH_EXCERPT_MORE = '…'
OPEN_GRAPH_HTML5 = True
OPEN_GRAPH_LEGACY_GALLERIES = False

# Gallery markup
CAROUSEL_CONTAINER_CLASS = 'carousel-gallery'
CAROUSEL_ITEM_CLASS = 'carousel-item'

# --- Markdown Extensions ---
MARKDOWN = {
    'extensions': [
        'markdown.extensions.extra',
        'markdown.extensions.meta',
    ],
    'output_format': 'html5',
}

# --- URL Settings ---
RELATIVE_URLS = True
