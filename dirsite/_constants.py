"""Common literal values used across dirsite.

These constants keep filenames, reserved names, and transient artifact names
centralized so the router, the orchestrator, and tests can import the same
values without drifting. Intended for internal use within the dirsite package.

Examples
--------
>>> from dirsite import _constants
>>> _constants.PAGE_NAV_FILENAME
'.dirsite-page-nav.json'
>>> "README" in _constants.RESERVED_STEMS
True
"""

__version__ = "0.1.0"

CONFIG_FILENAME = "dirsite.yaml"
INDEX_NAME = "index"
TEMPLATE_FILENAME = "template.html"
PROJECT_THEMES_DIR = ".themes"
RESERVED_STEMS = frozenset({"README", "LICENSE", "COPYING", "TODO", "AUTHORS"})

NAV_TREE_FILENAME = ".dirsite-nav.json"
PAGE_NAV_FILENAME = ".dirsite-page-nav.json"
PAGE_META_FILENAME = ".dirsite-page-meta.json"

ROOT_TITLE = "Home"
SERVE_HOST = "127.0.0.1"
SERVE_PORT = 8000
