import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: str = "") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./panopticon.db")
    db_echo: bool = _env_bool("DB_ECHO")

    # Application identity; also prefixes the form cache flash key
    application_name: str = os.getenv("APPLICATION_NAME", "panopticon")

    # Session cookie settings
    session_secret: str = os.getenv("SESSION_SECRET", "change-me")
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "panopticon_session")
    cookie_secure: bool = _env_bool("COOKIE_SECURE")

    templates_dir: str = os.getenv("TEMPLATES_DIR", str(_PROJECT_ROOT / "templates"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Avatar settings
    gravatar_base_url: str = os.getenv("GRAVATAR_BASE_URL", "https://www.gravatar.com")

    # Comma separated passlib schemes; the first one hashes new passwords
    password_schemes: str = os.getenv("PASSWORD_SCHEMES", "pbkdf2_sha256")


settings = Settings()
