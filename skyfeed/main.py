"""FastAPI application setup for SkyFeed."""

from fastapi import FastAPI

from skyfeed.exceptions import WeatherSourceError

from .api import SourceNotFound, source_not_found_handler, weather_source_error_handler
from .api import router as api_router

app = FastAPI(title="SkyFeed")

app.add_exception_handler(WeatherSourceError, weather_source_error_handler)
app.add_exception_handler(SourceNotFound, source_not_found_handler)


@app.get("/health")
def health():
    """Liveness probe; does not touch any provider."""
    return {"status": "ok"}


# API routes
app.include_router(api_router, prefix="/v1")
