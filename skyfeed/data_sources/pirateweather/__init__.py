"""PirateWeather adapter."""

from .service import PirateWeatherService

__all__ = ["PirateWeatherService"]
