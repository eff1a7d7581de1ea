"""Errores del dominio.

Política:
- `TransportError` es fatal: un registro parcial es peor que ninguno.
- `WriteError` afecta a un único documento; el resto se sigue escribiendo.
"""

from __future__ import annotations

from pathlib import Path


class RegistryError(Exception):
    """Base de los errores de la aplicación."""


class TransportError(RegistryError):
    """Falló una llamada a la API remota (red, status no-2xx o payload inválido)."""

    def __init__(self, message: str, *, url: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class WriteError(RegistryError):
    """No se pudo escribir un documento concreto."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Could not write {path}: {reason}")
        self.path = path
        self.reason = reason


class TaskSchemasError(RegistryError):
    """El fichero de schemas por tipo de tarea no se puede leer o no tiene el formato esperado."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
