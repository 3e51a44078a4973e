"""
Configuration settings for the RFC search index.
"""

RFSEE_VERSION = '0.0.1'

# Endpoints
RFC_INDEX_URL = 'https://www.ietf.org/rfc/rfc-index.txt'
RFC_EDITOR_URL_BASE = 'https://www.rfc-editor.org/rfc/rfc'
RFC_EDITOR_FILE_TYPE = 'txt'
HTTPS_PORT = 443

# Fetcher settings
USER_AGENT = f"rfsee/{RFSEE_VERSION}"
READ_CHUNK_SIZE = 64 * 1024  # bytes per socket read

# RFC index parsing
RFC_INDEX_START = '0001'
RFC_DELIMITER = '\n\n'
TITLE_CONTINUATION = '\n     '

# Crawl settings
WORKER_COUNT = 12
PROGRESS_INTERVAL = 5  # seconds between progress reports
MEMORY_WARNING_PERCENT = 90

# Indexer settings
WORD_MATCH_REGEX = r'\w+'
EPSILON = 0.0001  # keeps terms found in every RFC (e.g. "HTTP") from scoring 0
SCORE_SCALE = 1_000_000_000
SCORE_MIN = -2 ** 31
SCORE_MAX = 2 ** 31 - 1

# Search settings
SEARCH_TERMS_DELIMITER = ' '
MISSING_TITLE = 'MISSING TITLE'

# Index file location
INDEX_FILE_NAME = 'index.json'
CONFIG_DIR = '.config/rfsee'
DEFAULT_INDEX_PATH = '/tmp/index.json'

# Web search interface
WEB_HOST = '127.0.0.1'
WEB_PORT = 5000

# Logging
LOG_FORMAT = '%(asctime)s [%(levelname)s] [rfsee] %(message)s'
LOG_FILE = None  # e.g. 'rfsee.log'
