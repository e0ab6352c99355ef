import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Falls back to a local SQLite file so the API boots without Postgres in development
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./groomroute.db")
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql+psycopg2://", 1)

# Firebase Configuration
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# Frontend base URL for CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

# Nominatim (OpenStreetMap) geocoding
NOMINATIM_BASE_URL = os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org").rstrip(
    "/"
)
# Nominatim policy requires an identifying User-Agent
NOMINATIM_USER_AGENT = os.getenv("NOMINATIM_USER_AGENT", "GroomRoute/1.0")
GEOCODE_CACHE_SECONDS = int(os.getenv("GEOCODE_CACHE_SECONDS", "86400"))
GEOCODE_RPM = int(os.getenv("GEOCODE_RPM", "60"))

# Account defaults
DEFAULT_TIMEZONE = os.getenv("DEFAULT_TIMEZONE", "America/New_York")
