"""Shared fixtures: settings, model factory and an in-memory model source."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest

from core.config import AppSettings
from core.domain.errors import TransportError
from core.domain.models import ModelDescriptor, SchemaPair


def make_model(
    name: str,
    *,
    task: str = "Text Generation",
    tags: list[str] | None = None,
    properties: dict[str, Any] | None = None,
    **extra: Any,
) -> ModelDescriptor:
    return ModelDescriptor.model_validate(
        {
            "id": f"id-{name}",
            "name": name,
            "description": f"{name} description",
            "task": {"id": f"task-{task}", "name": task, "description": ""},
            "tags": tags or [],
            "properties": [{"property_id": k, "value": v} for k, v in (properties or {}).items()],
            **extra,
        }
    )


def text_generation_schema() -> dict[str, Any]:
    return {
        "input": {
            "type": "object",
            "oneOf": [
                {"title": "Prompt", "properties": {"prompt": {"type": "string"}, "lora": {"type": "string"}}},
                {
                    "title": "Messages",
                    "properties": {
                        "messages": {"type": "array"},
                        "tools": {"type": "array"},
                        "lora": {"type": "string"},
                    },
                },
            ],
        },
        "output": {
            "oneOf": [
                {"properties": {"response": {"type": "string"}, "tool_calls": {"type": "array"}}},
                {"type": "string", "format": "binary"},
            ]
        },
    }


class FakeModelSource:
    """In-memory `ModelSource` that records concurrency and call order."""

    def __init__(
        self,
        models: list[ModelDescriptor],
        schemas: dict[str, dict[str, Any]] | None = None,
        *,
        failing: set[str] | None = None,
    ) -> None:
        self.models = models
        self.schemas = schemas or {}
        self.failing = failing or set()
        self.requested: list[str] = []
        self.completed: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def __aenter__(self) -> "FakeModelSource":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.closed = True

    async def fetch_models(self) -> list[ModelDescriptor]:
        return list(self.models)

    async def fetch_schema(self, model_name: str) -> SchemaPair:
        self.requested.append(model_name)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if model_name in self.failing:
                raise TransportError(f"schema for {model_name} failed", status_code=500)
            return SchemaPair.model_validate(self.schemas.get(model_name, text_generation_schema()))
        finally:
            self.in_flight -= 1
            self.completed.append(model_name)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in (
        "MODEL_DOCS_ACCOUNT_ID",
        "MODEL_DOCS_AUTH_TOKEN",
        "MODEL_DOCS_OUTPUT_ROOT",
        "MODEL_DOCS_FILTER_EXPERIMENTAL",
    ):
        monkeypatch.delenv(key, raising=False)
    # Keep the real per-user .env out of every test.
    user_config = tmp_path / "user-config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(user_config))
    monkeypatch.setitem(
        AppSettings.model_config,
        "env_file",
        (".env", str(user_config / "model-docs" / ".env")),
    )


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        account_id="acc-123",
        auth_token="secret-token",
        output_root=tmp_path / "models",
        _env_file=None,
    )
