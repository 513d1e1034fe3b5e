import os
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.split(",") if p.strip()]


# --- Persistence ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./todos.db")
# Fernet key for taskname at rest. Unset = plaintext.
DB_ENCRYPTION_KEY = os.getenv("DB_ENCRYPTION_KEY")

# --- Tokens & passwords ---
JWT_SECRET = os.getenv("JWT_SECRET") or "devsecret"
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
# No expiry unless set to a positive number of minutes
TOKEN_EXPIRE_MINUTES = _env_int("TOKEN_EXPIRE_MINUTES", None)
BCRYPT_ROUNDS = _env_int("BCRYPT_ROUNDS", 10)

# --- HTTP ---
LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "10/minute")
RATE_LIMIT_ENABLED = _env_bool("RATE_LIMIT_ENABLED", True)
CORS_ORIGINS = _env_list("CORS_ORIGINS", ["http://localhost:3000", "http://127.0.0.1:3000"])
ALLOWED_HOSTS = _env_list("ALLOWED_HOSTS", ["localhost", "127.0.0.1", "0.0.0.0"])
PORT = _env_int("PORT", 3000)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
