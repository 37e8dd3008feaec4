import logging
import re

LOGLEVEL = logging.DEBUG

# MediaWiki Action API
DEFAULT_SITE = "en.wikipedia.org"
SITE_PATTERN = re.compile(
    r"^[a-z0-9-]+(\.m)?\.(wikipedia|wiktionary|wikibooks|wikinews|wikiquote|wikisource"
    r"|wikiversity|wikivoyage|wikidata|wikimedia|wikifunctions|mediawiki)\.org$"
)
API_PATH = "/w/api.php"
ARTICLE_PATH_PATTERN = re.compile(r"^/wiki/(?P<title>.+)$")
USER_AGENT = "revision-window-backend/1.0 (https://www.mediawiki.org/wiki/API:Etiquette)"
REQUEST_TIMEOUT = 15.0
RVPROP = "ids|timestamp|user|userid|size|comment|flags"

# Event logging
EVENT_INTAKE_URL = "https://intake-analytics.wikimedia.org/v1/events?hasty=true"
EDIT_SCHEMA = "/analytics/legacy/mobilewikiappedit/1.0.0"
EDIT_STREAM = "eventlogging_MobileWikiAppEdit"

# Service
CACHE_EXPIRE = 60
