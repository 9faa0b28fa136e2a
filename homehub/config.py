import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./homehub.db")

# Store backend: "sql" (default) or "redis"
STORE_BACKEND = os.getenv("STORE_BACKEND", "sql").lower()
REDIS_URL = os.getenv("REDIS_URL")
STORE_KEY_PREFIX = os.getenv("STORE_KEY_PREFIX", "homehub:doc:")
# Compare-and-swap attempts before giving up on a contended collection
STORE_MAX_RETRIES = int(os.getenv("STORE_MAX_RETRIES", "5"))

# Simulated worker reply in chat
CHAT_AUTO_REPLY_DELAY_MS = int(os.getenv("CHAT_AUTO_REPLY_DELAY_MS", "900"))
CHAT_AUTO_REPLY_TEXT = os.getenv(
    "CHAT_AUTO_REPLY_TEXT", "¡Entendido! Nos vemos el día del servicio."
)

# Label shown for reservations whose service id is no longer in the catalog
UNKNOWN_SERVICE_LABEL = os.getenv("UNKNOWN_SERVICE_LABEL", "Servicio")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
