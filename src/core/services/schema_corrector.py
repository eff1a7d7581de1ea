"""Schema post-processing.

The schema endpoint does not scope fields per model yet, so capability
specific fields (tool calling, LoRA adapters) show up for every text
generation model. The rules below strip them when the model lacks the
capability. Corrections never mutate their input: each call returns new
`SchemaPair` objects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Literal, Mapping

from core.domain.models import (
    ModelDescriptor,
    RegistryWarning,
    SchemaPair,
    WarningKind,
    get_property,
)
from core.services.registry_builder import task_type_from_name

logger = logging.getLogger(__name__)

TEXT_GENERATION = "text-generation"


def _is_text_generation(model: ModelDescriptor) -> bool:
    return task_type_from_name(model.task.name) == TEXT_GENERATION


def _lacks_capability(property_id: str) -> Callable[[ModelDescriptor], bool]:
    def predicate(model: ModelDescriptor) -> bool:
        return _is_text_generation(model) and get_property(model, property_id) != "true"

    return predicate


@dataclass(frozen=True)
class CorrectionRule:
    """Drop `field` from every `oneOf` branch of one side of the schema."""

    name: str
    applies: Callable[[ModelDescriptor], bool]
    side: Literal["input", "output"]
    field: str


CORRECTION_RULES: tuple[CorrectionRule, ...] = (
    CorrectionRule("no-function-calling-input", _lacks_capability("function_calling"), "input", "tools"),
    CorrectionRule("no-function-calling-output", _lacks_capability("function_calling"), "output", "tool_calls"),
    CorrectionRule("no-lora", _lacks_capability("lora"), "input", "lora"),
)


def _strip_branch_field(schema: dict[str, Any], field: str) -> None:
    branches = schema.get("oneOf")
    if not isinstance(branches, list):
        return
    for branch in branches:
        if not isinstance(branch, dict):
            continue
        properties = branch.get("properties")
        if isinstance(properties, dict):
            properties.pop(field, None)


def correct_schema(
    model: ModelDescriptor,
    schema: SchemaPair,
    *,
    rules: tuple[CorrectionRule, ...] = CORRECTION_RULES,
    warnings: list[RegistryWarning] | None = None,
) -> SchemaPair:
    """Return a corrected copy of `schema` for `model`."""

    if schema.input is None:
        message = f"Model {model.name} has no input schema, skipping corrections"
        logger.warning(message)
        if warnings is not None:
            warnings.append(RegistryWarning(kind=WarningKind.MISSING_SCHEMA, model=model.name, message=message))
        return schema.model_copy(deep=True)

    corrected = schema.model_copy(deep=True)
    for rule in rules:
        if not rule.applies(model):
            continue
        side = getattr(corrected, rule.side)
        if isinstance(side, dict):
            _strip_branch_field(side, rule.field)
    return corrected


def correct_schemas(
    models: list[ModelDescriptor],
    schemas: Mapping[str, SchemaPair],
    *,
    rules: tuple[CorrectionRule, ...] = CORRECTION_RULES,
    warnings: list[RegistryWarning] | None = None,
) -> dict[str, SchemaPair]:
    """Correct every schema that belongs to one of `models`.

    Entries without a matching model are copied through unchanged.
    """

    by_name = {model.name: model for model in models}
    out: dict[str, SchemaPair] = {}
    for name, schema in schemas.items():
        model = by_name.get(name)
        if model is None:
            out[name] = schema.model_copy(deep=True)
            continue
        out[name] = correct_schema(model, schema, rules=rules, warnings=warnings)
    return out
