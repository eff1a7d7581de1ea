"""Registry assembly.

Turns fetched models and their (corrected) schemas into the final
`filename -> document` mapping. Serialization of the front matter is
injected so the builder stays independent from YAML.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterable, Mapping

from core.domain.models import (
    DocumentParams,
    DocumentSchemas,
    ModelDescriptor,
    RegistryWarning,
    SchemaPair,
    WarningKind,
    get_property,
)

logger = logging.getLogger(__name__)

# Aliases that resolve to another catalog entry and have no page of their own.
KNOWN_ALIAS_DENYLIST: frozenset[str] = frozenset(
    {
        "@cf/meta/llama-2-7b-chat-hf-lora",
        "@cf/mistral/mistral-7b-instruct-v0.2-lora",
        "@cf/google/gemma-2b-it-lora",
        "@cf/google/gemma-7b-it-lora",
    }
)

EXPERIMENTAL_TAG = "experimental"
BETA_WEIGHT = 0
DEFAULT_WEIGHT = 100


def task_type_from_name(task_name: str) -> str:
    """Kebab case: lowercase, spaces become hyphens. Other punctuation is kept."""

    return "-".join(task_name.lower().split(" "))


def display_name_from_identifier(identifier: str) -> str:
    return identifier.rsplit("/", 1)[-1]


def weight_for(model: ModelDescriptor) -> int:
    beta = get_property(model, "beta")
    if beta is not None and str(beta).lower() == "true":
        return BETA_WEIGHT
    return DEFAULT_WEIGHT


def filter_models(
    models: Iterable[ModelDescriptor],
    *,
    denylist: Iterable[str] = KNOWN_ALIAS_DENYLIST,
    filter_experimental: bool = False,
    warnings: list[RegistryWarning] | None = None,
) -> list[ModelDescriptor]:
    """Drop known aliases and, if requested, experimental models."""

    denied = set(denylist)
    kept: list[ModelDescriptor] = []

    def warn(kind: WarningKind, model: ModelDescriptor, message: str) -> None:
        logger.warning(message)
        if warnings is not None:
            warnings.append(RegistryWarning(kind=kind, model=model.name, message=message))

    for model in models:
        if model.name in denied:
            warn(WarningKind.KNOWN_ALIAS, model, f"Skipping known alias {model.name}")
            continue
        if filter_experimental and model.has_tag(EXPERIMENTAL_TAG):
            warn(WarningKind.EXPERIMENTAL, model, f"Skipping experimental model {model.name}")
            continue
        kept.append(model)
    return kept


def _serialize_schema(schema: dict[str, Any] | None) -> str:
    return json.dumps(schema if schema is not None else {}, indent=2, ensure_ascii=False)


def build_document_params(model: ModelDescriptor, schema: SchemaPair | None) -> DocumentParams:
    display_name = display_name_from_identifier(model.name)
    schema = schema or SchemaPair()
    return DocumentParams(
        model=model.model_dump(mode="json"),
        task_type=task_type_from_name(model.task.name),
        model_display_name=display_name,
        weight=weight_for(model),
        title=display_name,
        json_schema=DocumentSchemas(
            input=_serialize_schema(schema.input),
            output=_serialize_schema(schema.output),
        ),
    )


def build_registry(
    models: Iterable[ModelDescriptor],
    schemas: Mapping[str, SchemaPair],
    *,
    render: Callable[[DocumentParams], str],
    extension: str = "md",
    warnings: list[RegistryWarning] | None = None,
) -> dict[str, str]:
    """Build `<display_name>.<extension> -> content` for every model.

    Models without a schema get empty ones. When two models share a display
    name the last one wins and a warning is recorded.
    """

    registry: dict[str, str] = {}
    owners: dict[str, str] = {}
    for model in models:
        params = build_document_params(model, schemas.get(model.name))
        filename = f"{params.model_display_name}.{extension}"
        if filename in registry:
            message = f"{model.name} overwrites {filename} generated for {owners[filename]}"
            logger.warning(message)
            if warnings is not None:
                warnings.append(RegistryWarning(kind=WarningKind.DUPLICATE_NAME, model=model.name, message=message))
        registry[filename] = render(params)
        owners[filename] = model.name
    return registry
