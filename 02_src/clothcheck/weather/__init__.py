"""Weather module."""

from .weather_client import IWeatherLookup, WeatherClient

__all__ = ["IWeatherLookup", "WeatherClient"]
