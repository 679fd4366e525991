import os


def env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


API_BASE = os.getenv("TCGCSV_API_BASE", "https://tcgcsv.com/tcgplayer").rstrip("/")
# TCGplayer category for Star Wars: Unlimited
CATEGORY_ID = int(os.getenv("TCGCSV_CATEGORY_ID", "79"))

# Groups processed in "auto" mode, in merge order
AUTO_GROUPS = [
    23405,  # Spark of Rebellion
    23488,  # Shadows of the Galaxy
    23597,  # Twilight of the Republic
    23956,  # Jump to Lightspeed
    24279,  # Legends of the Force
]

MODE = os.getenv("TRACKER_MODE", "all").lower()
DOWNLOAD_DIR = os.getenv("DOWNLOAD_DIR", "data")
RESULTS_DIR = os.getenv("RESULTS_DIR", "results")
REQUEST_TIMEOUT = int(os.getenv("TCGCSV_TIMEOUT", "45"))
USE_CACHE = env_flag("REQUESTS_CACHE")
# Seconds before a cached response is fetched again; prices refresh daily
CACHE_TTL = int(os.getenv("REQUESTS_CACHE_TTL", "3600"))
# Delay range between group downloads (seconds)
DOWNLOAD_DELAY_RANGE = (
    float(os.getenv("DOWNLOAD_DELAY_MIN", "0.5")),
    float(os.getenv("DOWNLOAD_DELAY_MAX", "1.5")),
)
