"""Météo-France adapter."""

from .service import MfService

__all__ = ["MfService"]
