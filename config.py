"""
Configuration for the Tourvisto API.
All secrets are loaded from environment variables (or a local .env file).
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

# ── Database ─────────────────────────────────────────────────────────────────
DATABASE_URL: str = os.getenv("DATABASE_URL", "")
DATABASE_NAME: str = os.getenv("DATABASE_NAME", "")

# ── Generative AI ────────────────────────────────────────────────────────────
GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

# ── External APIs ────────────────────────────────────────────────────────────
UNSPLASH_ACCESS_KEY: str = os.getenv("UNSPLASH_ACCESS_KEY", "")
UNSPLASH_SEARCH_URL: str = os.getenv("UNSPLASH_SEARCH_URL", "https://api.unsplash.com/search/photos")
COUNTRIES_API_URL: str = os.getenv("COUNTRIES_API_URL", "https://restcountries.com/v3.1/independent")
HTTP_TIMEOUT: float = float(os.getenv("HTTP_TIMEOUT", "10"))

# ── Authorization ────────────────────────────────────────────────────────────
# New profiles whose email is listed here are created with the admin role.
ADMIN_EMAILS: list[str] = [
    email.strip().lower() for email in os.getenv("ADMIN_EMAILS", "").split(",") if email.strip()
]

# ── Pagination ───────────────────────────────────────────────────────────────
TRIPS_PAGE_SIZE: int = int(os.getenv("TRIPS_PAGE_SIZE", "8"))
USERS_PAGE_SIZE: int = int(os.getenv("USERS_PAGE_SIZE", "10"))

# ── Server ───────────────────────────────────────────────────────────────────
PORT: int = int(os.getenv("PORT", "8000"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
