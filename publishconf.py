import os, sys
sys.path.insert(0, os.path.dirname(__file__))
from pelicanconf import *  # noqa

SITEURL = 'https://eloise.rip'
RELATIVE_URLS = False

FEED_ALL_ATOM = 'feeds/all.atom.xml'
DELETE_OUTPUT_DIRECTORY = True

# Production overrides for link previews
FACEBOOK_APP_ID = os.getenv('FACEBOOK_APP_ID', '')
FACEBOOK_COMMENTS = bool(os.getenv('FACEBOOK_COMMENTS'))
