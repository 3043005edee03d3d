"""Jerarquía de errores de aplicación compartida."""

from __future__ import annotations


class AppError(Exception):
    """Excepción base para errores específicos de la aplicación."""


class NetworkError(AppError):
    """Representa fallas relacionadas con la red."""


class TimeoutError(NetworkError):
    """Se genera cuando se agota el tiempo de espera de una operación de red."""


class ExternalAPIError(AppError):
    """Se genera cuando una API externa devuelve un error o una respuesta inutilizable."""


class ConfigurationError(AppError):
    """Se genera cuando falta configuración obligatoria para un servicio."""


__all__ = [
    "AppError",
    "NetworkError",
    "TimeoutError",
    "ExternalAPIError",
    "ConfigurationError",
]
