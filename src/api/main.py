"""FastAPI application entry point."""

import os
import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Must run before importing modules that read env vars (api.security)
load_dotenv()

# main.py is at <root>/src/api/main.py
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.errors import domain_error_handler
from api.routes import auth, health, settings, users
from domain.model.errors import DomainError
from utils.logging import setup_structured_logging
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.indexes import ensure_all_indexes

SERVICE_NAME = "Next Tools Accounts API"

setup_structured_logging(os.getenv("LOG_LEVEL", "INFO"), {"service": SERVICE_NAME})
logger = logging.getLogger(__name__)

# pyproject.toml is the single source of truth for the version
with open(_src_path.parent / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]


def _cors_settings(raw: str) -> tuple[str | list[str], bool]:
    """Parse CORS_ORIGINS into (origins, allow_credentials).

    Browsers refuse credentials with a wildcard origin, so "*" turns them off.
    """
    if raw.strip() == "*":
        logger.warning(
            "CORS configured with wildcard origin ('*'). "
            "For production, set CORS_ORIGINS to specific domains (e.g., 'https://app.example.com')"
        )
        return "*", False
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    logger.info("CORS configured with specific origins", extra={"origins": origins})
    return origins, True


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = get_mongodb_client()
    if client is None:
        logger.warning("MongoDB unavailable, skipping index creation")
    elif ensure_all_indexes(client[DATABASE_NAME]):
        logger.info("MongoDB indexes verified/created successfully")
    else:
        logger.warning("Failed to create some MongoDB indexes")
    yield


app = FastAPI(
    title=SERVICE_NAME,
    description="User accounts, role-based access control and global settings",
    version=VERSION,
    lifespan=lifespan,
)

cors_origins, allow_credentials = _cors_settings(os.getenv("CORS_ORIGINS", "*"))
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(DomainError, domain_error_handler)

for module in (health, auth, users, settings):
    app.include_router(module.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"service": SERVICE_NAME, "version": VERSION, "status": "running"}


if __name__ == "__main__":
    import uvicorn
    # Structured application logs replace uvicorn's access log
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)), access_log=False)
