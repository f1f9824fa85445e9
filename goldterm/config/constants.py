"""
Global constants for the gold terminal.
Keep ONLY pure constants here (no heavy imports / logic).
"""

# --- App meta / behavior ---
GOLD_API_URL = "https://api.gold-api.com/price/XAU"   # world spot, USD / troy oz
USER_AGENT = "GoldTerminal/2.0 (+local)"
API_TIMEOUT_MS = 10_000          # wall-clock bound per fetch
FETCH_SETTLE_MS = 800            # keep the "fetching" flag up at least this long after completion
READ_CHUNK_SIZE = 1024           # bytes per streamed read (deadline is checked between chunks)

# --- Plausibility band for the live price (USD / oz, inclusive) ---
MIN_VALID_GOLD_PRICE = 100
MAX_VALID_GOLD_PRICE = 100_000

# --- Units ---
# 1 troy ounce -> kyat thar. Exact literal; never derive at runtime.
OZ_TO_KYATTHAR = 1.873
LAKH = 100_000

# --- Defaults ---
DEFAULT_WORLD_PRICE = 4000        # USD / oz
DEFAULT_EXCHANGE_RATE = 4000      # MMK / USD
DEFAULT_MMK_GOLD_PRICE = 6_200_000  # MMK / kyat thar

# --- Input bounds ---
INPUT_MIN = 0
INPUT_MAX = 999_999_999

# --- Labels (Myanmar) ---
LABELS = {
    "APP_TITLE": "မြန်မာ့ရွှေ တာမီနယ်",
    "WORLD_PRICE": "ကမ္ဘာ့ရွှေဈေး",
    "EXCHANGE_RATE": "ဒေါ်လာပေါက်ဈေး",
    "MMK_PRICE": "မြန်မာ့ရွှေဈေး",
    "CALCULATED_PRICE": "တွက်ချက်ရရှိသော ရွှေဈေး",
    "IMPLIED_RATE": "ခန့်မှန်း ဒေါ်လာပေါက်ဈေး",
    "FORMULA_PRICE": "ƒ: (SPOT / 1.873) × RATE",
    "FORMULA_RATE": "ƒ: (MMK_GOLD × 1.873) / SPOT",
    "LAKHS": "သိန်း",
    "KYAT": "ကျပ်",
}

# Provenance line shown next to the world price
STATUS_CONNECTING = "ချိတ်ဆက်နေသည်..."
STATUS_LIVE = "တိုက်ရိုက်ထုတ်လွှင့်မှု"
STATUS_MANUAL = "ကိုယ်တိုင်ထည့်သွင်းမှု"

# Single user-facing message for every fetch failure
FETCH_ERROR_MESSAGE = "ကမ္ဘာ့ရွှေဈေး ရယူ၍မရပါ။ ထပ်စမ်းကြည့်ပါ။"

# --- Environment keys (see config/settings.py) ---
ENV_SETTLE_MS = "GOLDTERM_SETTLE_MS"
ENV_LOG_LEVEL = "GOLDTERM_LOG_LEVEL"
ENV_USER_AGENT = "GOLDTERM_USER_AGENT"
