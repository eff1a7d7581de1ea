"""Escritura de documentos en disco.

Por qué JSON/Markdown plano en disco:
- El generador de sitio estático consume directamente el directorio de contenido.
- Cada documento se escribe por separado; un fallo no toca los demás.
"""

from __future__ import annotations

import logging
from pathlib import Path

from core.domain.errors import WriteError
from core.interfaces.document_sink import DocumentSink

logger = logging.getLogger(__name__)


class FileSystemDocumentSink(DocumentSink):
    """Escribe documentos UTF-8, creando los directorios necesarios."""

    def write(self, path: Path, content: str) -> Path:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise WriteError(path, str(exc)) from exc
        logger.info("Wrote %s", path)
        return path
