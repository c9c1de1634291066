"""OpenWeatherMap adapter."""

from .service import OwmService

__all__ = ["OwmService"]
