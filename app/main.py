import logging
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import credit_history, editions, titles
from app.config import settings
from app.db_init import init_db, seed_base_titles
from app.models import get_db

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logging.getLogger("botocore").setLevel(logging.WARNING)
logger = logging.getLogger("app.startup")


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.hostname)


def _get_cors_origins(cors_raw: str) -> list[str]:
    return [origin.strip().strip("'\"") for origin in cors_raw.split(",") if origin.strip()]


def _validate_database_url_for_runtime(database_url: str) -> None:
    parsed = urlparse(database_url)
    scheme = parsed.scheme
    postgres_schemes = {"postgres", "postgresql", "postgresql+psycopg"}

    if not scheme:
        raise RuntimeError("DATABASE_URL is missing URL scheme (expected postgresql:// or sqlite://).")
    if scheme == "sqlite":
        return
    if scheme not in postgres_schemes:
        raise RuntimeError(
            f"DATABASE_URL has unsupported scheme '{scheme}' "
            "(expected postgresql://, postgresql+psycopg:// or sqlite://)."
        )
    if not parsed.hostname:
        raise RuntimeError("DATABASE_URL is missing host.")
    if not parsed.path.lstrip("/"):
        raise RuntimeError("DATABASE_URL is missing database name in path.")


def _db_url_diagnostics(database_url: str) -> str:
    parsed = urlparse(database_url)
    host = parsed.hostname or "<missing>"
    port = parsed.port or "<missing>"
    db_name = parsed.path.lstrip("/") or "<missing>"
    scheme = parsed.scheme or "<missing>"
    return f"scheme={scheme}, host={host}, port={port}, database={db_name}"


def _validate_required_env_for_runtime() -> None:
    errors = []
    warnings = []

    if not _is_http_url(settings.BASE_URL.strip()):
        errors.append("BASE_URL must be an absolute http(s) URL, e.g. https://raffle.example.com")

    origins = _get_cors_origins(settings.CORS_ORIGINS)
    if not origins:
        errors.append("CORS_ORIGINS must contain at least one comma-separated origin URL.")
    else:
        invalid_origins = [origin for origin in origins if not _is_http_url(origin)]
        if invalid_origins:
            errors.append(f"CORS_ORIGINS contains invalid URL(s): {', '.join(invalid_origins)}")

    if not settings.S3_BUCKET:
        warnings.append("S3_BUCKET is not set; editions cannot receive banner images.")
    if settings.DEFAULT_TITLE_VALUE < 0:
        errors.append("DEFAULT_TITLE_VALUE must not be negative.")

    if warnings:
        logger.warning("Startup environment warnings: %s", " | ".join(warnings))

    if errors:
        raise RuntimeError("Startup environment validation failed: " + " | ".join(errors))


@asynccontextmanager
async def lifespan(app: FastAPI):
    database_url = "<unavailable>"
    logger.info("Application startup initiated.")
    try:
        database_url = settings.DATABASE_URL
        logger.info("DATABASE_URL diagnostics at startup: %s", _db_url_diagnostics(database_url))
        _validate_database_url_for_runtime(database_url)
        _validate_required_env_for_runtime()
        init_db()
    except Exception as exc:
        logger.exception("Database initialization failed: %s", str(exc))
        raise
    db = next(get_db())
    try:
        seed_base_titles(db, settings.BASE_TITLES_SEED_COUNT)
    finally:
        db.close()
    logger.info("Application startup completed successfully.")
    yield


app = FastAPI(
    title="Raffle Editions API",
    description="Backend API for raffle editions, their titles, title purchases and credit history.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Editions", "description": "Create, list, update and delete editions and their titles."},
        {"name": "Titles", "description": "List titles and buy them."},
        {"name": "Credit history", "description": "User deposits and their settlement."},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(settings.CORS_ORIGINS),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(editions.router, prefix="/api/editions", tags=["Editions"])
app.include_router(titles.router, prefix="/api/titles", tags=["Titles"])
app.include_router(credit_history.router, prefix="/api/credit-history", tags=["Credit history"])


@app.get("/")
def root():
    return {"status": "ok", "service": "Raffle Editions API"}


@app.get("/health")
def health():
    return {"status": "ok"}
