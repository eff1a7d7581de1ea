"""Carga de schemas por tipo de tarea (JSON local).

Formato:
- {"text-generation": {"input": {...}, "output": {...}}, ...}

Se usa en lugar de la API de schemas cuando `task_schemas_path` está
configurado: todos los modelos de un mismo tipo comparten el par de schemas.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from core.domain.errors import TaskSchemasError
from core.domain.models import SchemaPair

_TASK_SCHEMAS = TypeAdapter(dict[str, SchemaPair])


def load_task_schemas(path: Path) -> dict[str, SchemaPair]:
    """Lee y valida el fichero; cualquier fallo es un `TaskSchemasError`."""

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TaskSchemasError(path, f"cannot be read ({exc.strerror or exc})") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise TaskSchemasError(path, f"is not valid JSON (line {exc.lineno}, column {exc.colno})") from exc
    try:
        return _TASK_SCHEMAS.validate_python(data)
    except ValidationError as exc:
        raise TaskSchemasError(
            path,
            f"does not map task types to input/output schemas ({exc.error_count()} errors)",
        ) from exc
