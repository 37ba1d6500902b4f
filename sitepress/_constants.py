"""Common literal values used across sitepress.

Folder names, marker files and output defaults live here so the pipeline,
generators, CLI and tests agree on the on-disk layout of a site project.

Examples
--------
>>> from sitepress import _constants
>>> _constants.OUTPUT_FOLDER
'Output'
>>> f"{_constants.INTERNAL_FOLDER}/{_constants.CACHES_FOLDER}"
'.publish/Caches'
"""

OUTPUT_FOLDER = "Output"
INTERNAL_FOLDER = ".publish"
CACHES_FOLDER = "Caches"
LAST_GENERATION_MARKER = "lastGenerationDate"
CONTENT_FOLDER = "Content"
RESOURCES_FOLDER = "Resources"
CONFIG_FILE = "site.yaml"

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M"
DEFAULT_RSS_PATH = "feed.rss"
DEFAULT_TAG_BASE_PATH = "tags"
DEFAULT_FAVICON_PATH = "images/favicon.png"
SITEMAP_PATH = "sitemap.xml"
FEED_CACHE_NAME = "feed"

MARKDOWN_EXTENSIONS = frozenset({"md", "markdown", "txt", "text"})
