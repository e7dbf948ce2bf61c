# edogrula/config.py
from dotenv import load_dotenv
import os

load_dotenv()


def search_cache_ttl_seconds(env=os.environ) -> float:
    """
    Cache TTL in seconds. BUSINESS_SEARCH_TTL_SECONDS wins; the millisecond
    BUSINESS_SEARCH_TTL_MS is still honored for existing deployments.
    """
    seconds = env.get("BUSINESS_SEARCH_TTL_SECONDS")
    if seconds:
        return float(seconds)
    millis = env.get("BUSINESS_SEARCH_TTL_MS")
    if millis:
        return float(millis) / 1000
    return 15.0


# Storage
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB = os.getenv("MONGO_DB", "edogrula")
BUSINESS_COLLECTION = os.getenv("BUSINESS_COLLECTION", "businesses")
BLACKLIST_COLLECTION = os.getenv("BLACKLIST_COLLECTION", "blacklists")

# Search parameters
DEFAULT_REGION = "TR"
MAX_QUERY_LENGTH = 160
MIN_NAME_KEY_LENGTH = 2
MIN_PHONE_DIGITS = 7
DEFAULT_LIMIT = 10
MAX_LIMIT = 25
SEARCH_CACHE_TTL_SECONDS = search_cache_ttl_seconds()
SEARCH_CACHE_MAX_ENTRIES = int(os.getenv("BUSINESS_SEARCH_CACHE_MAX_ENTRIES", "10000"))

# Directory listing
FILTER_DEFAULT_PER_PAGE = 20
FILTER_MAX_PER_PAGE = 50
MAX_FILTER_TERM_LENGTH = 120

# Runtime parameters
BATCH_SIZE = 15
CONCURRENCY = 100
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# File names
INPUT_CSV = "queries.csv"
OUTPUT_CSV = "search_results.csv"
BUSINESSES_CSV = "businesses.csv"
BLACKLIST_CSV = "blacklist.csv"
