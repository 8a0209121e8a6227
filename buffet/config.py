import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./buffet.db")

# "development" or "production"
ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
IS_PRODUCTION = ENVIRONMENT == "production"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Sessions - CRITICAL: No default secret in production
SESSION_SECRET = os.getenv("SESSION_SECRET")
if not SESSION_SECRET:
    import warnings

    warnings.warn(
        "SESSION_SECRET not set! Using insecure default - DO NOT USE IN PRODUCTION",
        RuntimeWarning,
        stacklevel=2,
    )
    SESSION_SECRET = "INSECURE-DEV-SESSION-SECRET-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "buffet.sid")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(24 * 60 * 60)))  # 24 hours

# bcrypt work factor (lower it in tests only)
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Frontend dashboard
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:5173,http://localhost:5174,http://localhost:5175",
).split(",")
# Any localhost port is accepted in development (Vite picks the next free one)
ALLOWED_ORIGIN_REGEX = os.getenv("ALLOWED_ORIGIN_REGEX", r"^http://localhost:\d+$")

# Rate limiting: 100 requests per 15 minutes per IP
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "100"))
RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", str(15 * 60)))
# Optional - counters stay in memory when unset
REDIS_URL = os.getenv("REDIS_URL")

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"

# API client (dashboard side)
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3002/api")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "10"))  # seconds
API_RETRY_ATTEMPTS = int(os.getenv("API_RETRY_ATTEMPTS", "3"))
API_RETRY_DELAY = float(os.getenv("API_RETRY_DELAY", "1.0"))  # base delay for exponential backoff
