"""
Domain: 集中管理所有常數與閾值。
避免散落在各模組中的 magic numbers / magic strings。
"""

# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------
SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600
MILLISECONDS_PER_SECOND = 1000

# All series are expressed as "value of 1 asset in UNIT_CURRENCY"
UNIT_CURRENCY = "USD"

# ---------------------------------------------------------------------------
# Symbol Classification
# ---------------------------------------------------------------------------
FIAT_SYMBOL_PATTERN = r"^[A-Z]{3,5}$"

# Supported fiat currencies (Frankfurter / ECB reference rates)
FIAT_CURRENCIES: dict[str, str] = {
    "AUD": "Australian Dollar",
    "BRL": "Brazilian Real",
    "CAD": "Canadian Dollar",
    "CHF": "Swiss Franc",
    "CNY": "Chinese Yuan",
    "DKK": "Danish Krone",
    "EUR": "Euro",
    "GBP": "British Pound",
    "HKD": "Hong Kong Dollar",
    "INR": "Indian Rupee",
    "JPY": "Japanese Yen",
    "KRW": "South Korean Won",
    "MXN": "Mexican Peso",
    "NOK": "Norwegian Krone",
    "NZD": "New Zealand Dollar",
    "SEK": "Swedish Krona",
    "SGD": "Singapore Dollar",
    "TRY": "Turkish Lira",
    "USD": "US Dollar",
    "ZAR": "South African Rand",
}
FIAT_FLAG_URL_TEMPLATE = "https://flagcdn.com/{country}.svg"
# EUR has no ISO country; flagcdn serves the EU flag under "eu"
FIAT_FLAG_COUNTRY_OVERRIDES: dict[str, str] = {"EUR": "eu"}

# ---------------------------------------------------------------------------
# Upstream APIs
# ---------------------------------------------------------------------------
COINGECKO_API_URL = "https://api.coingecko.com/api/v3"
COINGECKO_API_KEY_HEADER = "x-cg-demo-api-key"
COINGECKO_API_KEY = ""  # 由 init_settings() 從環境變數覆寫
COINGECKO_VS_CURRENCY = "usd"
FRANKFURTER_API_URL = "https://api.frankfurter.app"

UPSTREAM_REQUEST_TIMEOUT = 10  # seconds
UPSTREAM_RETRY_ATTEMPTS = 3
UPSTREAM_RETRY_WAIT_MIN = 1  # seconds (exponential backoff minimum)
UPSTREAM_RETRY_WAIT_MAX = 5  # seconds (exponential backoff maximum)
UPSTREAM_THREAD_POOL_SIZE = 4

# ---------------------------------------------------------------------------
# Crypto Catalog / Symbol Map
# ---------------------------------------------------------------------------
CATALOG_PAGE_SIZE = 250  # CoinGecko /coins/markets per_page upper bound
CATALOG_PAGES = 5  # 5 × 250 = 1250 assets
CATALOG_ORDER = "market_cap_desc"
SYMBOL_MAP_TTL = 3600  # 1 hour
SYMBOL_MAP_FAILURE_BACKOFF = 60  # 重建失敗後 60 秒內沿用舊資料，不再呼叫上游

# ---------------------------------------------------------------------------
# Response Cache (L1 記憶體)
# ---------------------------------------------------------------------------
MARKET_CHART_CACHE_MAXSIZE = 200
MARKET_CHART_CACHE_TTL = 60  # 1 minute
FX_RANGE_CACHE_MAXSIZE = 100
FX_RANGE_CACHE_TTL = 3600  # 1 hour (ECB publishes once per working day)
SPOT_CACHE_MAXSIZE = 200
SPOT_CACHE_TTL = 60  # 1 minute

# ---------------------------------------------------------------------------
# Ratio History
# ---------------------------------------------------------------------------
HISTORY_DEFAULT_DAYS = 30
HISTORY_MIN_DAYS = 1
HISTORY_MAX_DAYS = 365
LONG_RANGE_DAYS = 90  # 90 天以上視為長區間，需降採樣
LONG_RANGE_MIN_SPACING = 3 * SECONDS_PER_HOUR

# ---------------------------------------------------------------------------
# API Error Messages
# ---------------------------------------------------------------------------
GENERIC_UNKNOWN_SYMBOL_ERROR = "Unknown ticker symbol"
GENERIC_CATALOG_UNAVAILABLE_ERROR = "Asset catalog temporarily unavailable"
