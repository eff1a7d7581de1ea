"""Contrato de la fuente de modelos.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite sustituir la API real por una fuente en memoria en tests.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from core.domain.models import ModelDescriptor, SchemaPair


@runtime_checkable
class ModelSource(Protocol):
    """Recuperación pura de datos, sin lógica de negocio.

    Reglas de diseño:
    - Ambos métodos son asíncronos porque hacen I/O (HTTP).
    - Cualquier fallo se propaga como `TransportError`; no hay reintentos.
    """

    async def fetch_models(self) -> Sequence[ModelDescriptor]:
        """Devuelve el catálogo completo de modelos."""

        ...

    async def fetch_schema(self, model_name: str) -> SchemaPair:
        """Devuelve el par de schemas de `model_name`."""

        ...
