"""Model registry orchestration.

The CLI delegates the whole fetch -> correct -> build -> write flow to these
helpers, which keeps side-effects (printing, progress bars) out of the core
logic and makes the pipeline reusable from tests or other entry-points.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Sequence

from adapters.front_matter import render_document
from adapters.task_schemas import load_task_schemas
from core.config import AppSettings
from core.domain.errors import WriteError
from core.domain.models import ModelDescriptor, RegistryWarning, SchemaPair
from core.interfaces.document_sink import DocumentSink
from core.interfaces.model_source import ModelSource
from core.services.registry_builder import (
    KNOWN_ALIAS_DENYLIST,
    build_registry,
    filter_models,
    task_type_from_name,
)
from core.services.schema_corrector import correct_schemas
from core.services.schema_fetcher import fetch_schemas

logger = logging.getLogger(__name__)


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress, warnings)."""

    warning: Callable[[RegistryWarning], None] | None = None
    models_fetched: Callable[[int], None] | None = None
    schema_progress: Callable[[int, int], None] | None = None


@dataclass
class PipelineResult:
    """Output of a pipeline invocation."""

    registry: dict[str, str]
    models: list[ModelDescriptor]
    task_types: list[str]
    warnings: list[RegistryWarning] = field(default_factory=list)


@dataclass
class WriteReport:
    written: list[Path] = field(default_factory=list)
    failures: list[WriteError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def _schemas_by_task(
    models: Sequence[ModelDescriptor],
    task_schemas: Mapping[str, SchemaPair],
) -> dict[str, SchemaPair]:
    resolved: dict[str, SchemaPair] = {}
    for model in models:
        schema = task_schemas.get(task_type_from_name(model.task.name))
        if schema is not None:
            resolved[model.name] = schema
    return resolved


async def generate_registry(
    *,
    settings: AppSettings,
    source: ModelSource,
    hooks: PipelineHooks | None = None,
) -> PipelineResult:
    """Fetch models and schemas and build the `filename -> content` registry.

    Transport failures propagate; data anomalies become warnings.
    """

    hooks = hooks or PipelineHooks()
    warnings: list[RegistryWarning] = []

    models = list(await source.fetch_models())
    logger.info("Found %d models", len(models))
    if hooks.models_fetched:
        hooks.models_fetched(len(models))

    models = filter_models(
        models,
        denylist=KNOWN_ALIAS_DENYLIST | set(settings.extra_denylist),
        filter_experimental=settings.filter_experimental,
        warnings=warnings,
    )

    if settings.task_schemas_path is not None:
        schemas = _schemas_by_task(models, load_task_schemas(settings.task_schemas_path))
    else:
        schemas = await fetch_schemas(
            source,
            models,
            batch_size=settings.schema_batch_size,
            progress=hooks.schema_progress,
        )

    schemas = correct_schemas(models, schemas, warnings=warnings)

    registry = build_registry(
        models,
        schemas,
        render=lambda params: render_document(params, body=settings.document_body),
        extension=settings.document_extension,
        warnings=warnings,
    )

    if hooks.warning:
        for warning in warnings:
            hooks.warning(warning)

    task_types = sorted({task_type_from_name(model.task.name) for model in models})
    return PipelineResult(registry=registry, models=models, task_types=task_types, warnings=warnings)


def write_registry(
    *,
    registry: Mapping[str, str],
    output_root: Path,
    sink: DocumentSink,
) -> WriteReport:
    """Write every entry; a failed document does not stop the others."""

    report = WriteReport()
    for filename, content in registry.items():
        try:
            report.written.append(sink.write(output_root / filename, content))
        except WriteError as exc:
            logger.error("%s", exc)
            report.failures.append(exc)
    return report
