"""Contrato del destino de documentos."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class DocumentSink(Protocol):
    """Escribe un documento por llamada.

    Cada escritura es independiente: un fallo (`WriteError`) no afecta a los
    documentos ya escritos.
    """

    def write(self, path: Path, content: str) -> Path:
        ...
