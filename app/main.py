"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_error_handlers
from app.api.v1 import router as v1_router
from app.core.config import settings
from app.core.logging import configure_logging
from app.middleware.request_logger import log_requests

configure_logging(settings)

app = FastAPI(
    title="Inkwell API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Added first so it sits inside the request logger and CORS layers.
register_error_handlers(app)

if settings.APP_ENV != "test":
    app.middleware("http")(log_requests)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV != "prod" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Inkwell API"}
