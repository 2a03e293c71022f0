# app/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./uaifood.db")
DB_ECHO = _as_bool(os.getenv("DB_ECHO", "false"))
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 10))

API_PREFIX = os.getenv("API_PREFIX", "/api/v1")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production-use-a-long-random-value")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", 8 * 60))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 10))

# upper bound for the whole place-order transaction
ORDER_TX_TIMEOUT_SECONDS = float(os.getenv("ORDER_TX_TIMEOUT_SECONDS", 10))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SEED_ON_STARTUP = _as_bool(os.getenv("SEED_ON_STARTUP", "false"))
ADMIN_NAME = os.getenv("ADMIN_NAME", "Administrador")
ADMIN_PHONE = os.getenv("ADMIN_PHONE", "31999999999")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
