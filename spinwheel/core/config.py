"""
Runtime configuration.
Read once from the environment at startup and passed explicitly to the
engine, the spin routes and the email adapter.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

LOCAL_DB_FILENAME = "zootechx.db"
DEFAULT_PORT = 3000
DEFAULT_SMTP_HOST = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 587
DEFAULT_EMAIL_TIMEOUT = 10.0  # seconds, connection + handshake
DEFAULT_SENDER_NAME = "ZooTechX"

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(value: Optional[str]) -> bool:
    return bool(value) and value.strip().lower() in _TRUTHY


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_database_url(url: str) -> str:
    # Render/Heroku hand out postgres:// which SQLAlchemy no longer accepts
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def local_database_url(environ: Mapping[str, str]) -> str:
    is_production = (
        environ.get("NODE_ENV") == "production"
        or environ.get("APP_ENV") == "production"
        or bool(environ.get("RENDER"))
    )
    # Render's filesystem is read-only outside /tmp
    path = Path("/tmp") / LOCAL_DB_FILENAME if is_production else PROJECT_ROOT / LOCAL_DB_FILENAME
    return f"sqlite:///{path}"


@dataclass(frozen=True)
class Settings:
    port: int = DEFAULT_PORT
    database_url: str = f"sqlite:///{PROJECT_ROOT / LOCAL_DB_FILENAME}"
    database_url_configured: bool = False

    gmail_user: Optional[str] = None
    gmail_app_password: Optional[str] = None
    smtp_host: str = DEFAULT_SMTP_HOST
    smtp_port: int = DEFAULT_SMTP_PORT
    resend_api_key: Optional[str] = None
    sender_email: Optional[str] = None
    sender_name: str = DEFAULT_SENDER_NAME
    email_timeout: float = DEFAULT_EMAIL_TIMEOUT

    reward_catalog_strict: bool = False
    static_dir: Path = PROJECT_ROOT / "public"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        database_url = _clean(env.get("DATABASE_URL"))
        gmail_user = _clean(env.get("GMAIL_USER"))

        return cls(
            port=int(env.get("PORT") or DEFAULT_PORT),
            database_url=normalize_database_url(database_url) if database_url else local_database_url(env),
            database_url_configured=database_url is not None,
            gmail_user=gmail_user,
            gmail_app_password=_clean(env.get("GMAIL_APP_PASSWORD")),
            smtp_host=_clean(env.get("SMTP_HOST")) or DEFAULT_SMTP_HOST,
            smtp_port=int(env.get("SMTP_PORT") or DEFAULT_SMTP_PORT),
            resend_api_key=_clean(env.get("RESEND_API_KEY")),
            sender_email=_clean(env.get("SENDER_EMAIL")) or gmail_user,
            sender_name=_clean(env.get("SENDER_NAME")) or DEFAULT_SENDER_NAME,
            email_timeout=float(env.get("EMAIL_TIMEOUT_SECONDS") or DEFAULT_EMAIL_TIMEOUT),
            reward_catalog_strict=_flag(env.get("REWARD_CATALOG_STRICT")),
            static_dir=Path(env["STATIC_DIR"]) if env.get("STATIC_DIR") else PROJECT_ROOT / "public",
        )

    @property
    def smtp_configured(self) -> bool:
        return bool(self.gmail_user and self.gmail_app_password)

    @property
    def email_transport(self) -> Optional[str]:
        """Which transport coupon emails go out on: "resend", "smtp" or None."""
        if self.resend_api_key and self.sender_email:
            return "resend"
        if self.smtp_configured:
            return "smtp"
        return None

    @property
    def uses_local_storage(self) -> bool:
        return not self.database_url_configured

    @property
    def database_backend(self) -> str:
        if self.uses_local_storage:
            return "Local SQLite"
        scheme = self.database_url.split(":", 1)[0]
        dialect = scheme.split("+", 1)[0]
        return {"sqlite": "SQLite", "postgresql": "PostgreSQL"}.get(dialect, dialect)

    def status_flags(self) -> dict:
        """Configured/NOT SET flags for the health check and the startup log."""
        def flag(value) -> str:
            return "configured" if value else "NOT SET"

        return {
            "port": self.port,
            "gmailUser": flag(self.gmail_user),
            "gmailPassword": flag(self.gmail_app_password),
            "resendApiKey": flag(self.resend_api_key),
            "emailTransport": self.email_transport or "disabled",
            "database": self.database_backend,
            "databaseUrl": flag(self.database_url_configured),
        }
