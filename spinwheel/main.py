"""
Spin-the-wheel coupon backend.
One spin per email; the coupon email goes out in the background.
"""
from dotenv import load_dotenv
load_dotenv()

import logging
import sys
from typing import Optional

from alembic import command
from alembic.config import Config

# Render captures stdout; the logging module is more reliable than print
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)],
    force=True,  # Override any existing configuration
)

logger = logging.getLogger(__name__)

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from spinwheel.api.routes import health, spins
from spinwheel.core.config import PROJECT_ROOT, Settings
from spinwheel.db.base import Base
from spinwheel.db.session import build_engine, build_session_factory
# Import all models to ensure they're registered with Base
from spinwheel.models import Spin  # noqa: F401


def run_migrations(settings: Settings) -> None:
    """Run Alembic migrations against the configured database.
    Raises on failure so the service never starts against an out-of-sync schema."""
    alembic_ini = PROJECT_ROOT / "alembic.ini"
    if not alembic_ini.exists():
        logger.warning("alembic.ini not found, skipping Alembic migrations")
        return
    try:
        alembic_cfg = Config(str(alembic_ini))
        alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
        alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
        command.upgrade(alembic_cfg, "head")
        logger.info("Alembic migrations completed successfully")
    except Exception as e:
        logger.exception("Alembic migration failed: %s", e)
        raise


def log_environment(settings: Settings) -> None:
    logger.info("=== Environment Check ===")
    for key, value in settings.status_flags().items():
        logger.info("%s: %s", key, value)
    logger.info("=========================")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(title="Spin the Wheel")
    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    @app.on_event("startup")
    def startup_event():
        """Create the spins table, then bring an explicitly configured database to Alembic head."""
        log_environment(settings)
        logger.info("Using %s database", settings.database_backend)

        Base.metadata.create_all(bind=engine)
        logger.info("✅ Database tables ready")

        if settings.database_url_configured:
            run_migrations(settings)

    @app.on_event("shutdown")
    def shutdown_event():
        engine.dispose()

    app.include_router(spins.router, prefix="/api", tags=["Spins"])
    app.include_router(health.router, prefix="/api", tags=["Health"])

    # Serve the wheel widget last so /api routes take precedence
    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(settings.static_dir), html=True), name="public")
    else:
        logger.info("No widget directory at %s; serving the API only", settings.static_dir)

    return app


app = create_app()
