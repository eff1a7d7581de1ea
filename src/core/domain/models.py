"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta del payload remoto en el borde, sin acoplar el Core a HTTP.
- Los metadatos extra del proveedor se conservan (`extra="allow"`) para
  volcarlos tal cual en el front matter.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, PrivateAttr, field_validator
from pydantic.config import ConfigDict


class ModelTask(BaseModel):
    """Tarea que resuelve un modelo (p.ej. "Text Generation")."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str | None = None
    name: str = Field(..., min_length=1, description="Nombre legible de la tarea.")
    description: str | None = None


class ModelProperty(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    property_id: str = Field(..., min_length=1)
    value: Any = None


class ModelDescriptor(BaseModel):
    """Un modelo del catálogo remoto.

    Por qué un mapa privado de propiedades:
    - La API devuelve `properties` como lista de `{property_id, value}`; el mapa
      se construye una sola vez y `get_property` da acceso tipado.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str | None = None
    name: str = Field(
        ...,
        min_length=1,
        description="Identificador con namespace, p.ej. '@cf/meta/llama-3-8b-instruct'.",
    )
    description: str | None = None
    task: ModelTask
    tags: list[str] = Field(default_factory=list)
    properties: list[ModelProperty] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def check_display_segment(cls, value: str) -> str:
        # El último segmento da nombre al documento generado.
        if not value.rsplit("/", 1)[-1].strip():
            raise ValueError("identifier must not end with '/'")
        return value

    _property_map: dict[str, Any] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self._property_map = {p.property_id: p.value for p in self.properties}

    def get_property(self, key: str, default: Any = None) -> Any:
        return self._property_map.get(key, default)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags


def get_property(descriptor: ModelDescriptor, key: str, default: Any = None) -> Any:
    """Valor de la propiedad `key` del modelo, o `default` si no existe."""

    return descriptor.get_property(key, default)


class SchemaPair(BaseModel):
    """Schemas JSON de request (`input`) y response (`output`) de un modelo."""

    model_config = ConfigDict(extra="allow")

    input: dict[str, Any] | None = None
    output: dict[str, Any] | None = None


class DocumentSchemas(BaseModel):
    input: str = Field(..., description="Schema de entrada serializado como JSON.")
    output: str = Field(..., description="Schema de salida serializado como JSON.")


class DocumentParams(BaseModel):
    """Front matter de un documento del registro.

    El orden de los campos es el orden en que se serializan.
    """

    model_config = ConfigDict(protected_namespaces=())

    model: dict[str, Any] = Field(..., description="Descriptor completo del modelo.")
    task_type: str = Field(..., min_length=1)
    model_display_name: str = Field(..., min_length=1)
    layout: str = Field(default="model")
    weight: int = Field(..., ge=0)
    title: str = Field(..., min_length=1)
    json_schema: DocumentSchemas


class WarningKind(str, Enum):
    """Anomalías recuperables: se registran y la ejecución continúa."""

    MISSING_SCHEMA = "missing_schema"
    KNOWN_ALIAS = "known_alias"
    EXPERIMENTAL = "experimental"
    DUPLICATE_NAME = "duplicate_name"


class RegistryWarning(BaseModel):
    kind: WarningKind
    model: str
    message: str

    def __str__(self) -> str:
        return self.message
