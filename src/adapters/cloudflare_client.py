"""Fuente de modelos: API REST de Workers AI.

Endpoints:
- `GET /accounts/{account_id}/ai/models/search` -> `{result: [ModelDescriptor]}`
- `GET /accounts/{account_id}/ai/models/schema?model=<name>` -> `{result: SchemaPair}`

Nota:
- Sin paginación ni reintentos: cualquier fallo es un `TransportError`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import TransportError
from core.domain.models import ModelDescriptor, SchemaPair
from core.interfaces.model_source import ModelSource

logger = logging.getLogger(__name__)


class CloudflareModelSource(ModelSource):
    """Cliente del catálogo de modelos.

    Usa un único `httpx.AsyncClient` para todas las peticiones, de modo que
    los lotes concurrentes del fetcher comparten el pool de conexiones.
    """

    def __init__(
        self,
        settings: AppSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._client = build_async_client(settings, transport=transport)
        self._account_path = f"/accounts/{settings.account_id}/ai/models"

    async def __aenter__(self) -> "CloudflareModelSource":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_result(self, path: str, params: dict[str, str] | None = None) -> Any:
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {path} failed: {exc}", url=path) from exc

        url = str(response.url)
        if response.status_code < 200 or response.status_code >= 300:
            raise TransportError(
                f"GET {url} returned HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(f"GET {url} returned invalid JSON", url=url, status_code=response.status_code) from exc

        if not isinstance(payload, dict):
            raise TransportError(f"GET {url} returned an unexpected payload", url=url, status_code=response.status_code)
        if payload.get("success") is False:
            errors = payload.get("errors") or []
            raise TransportError(
                f"GET {url} was rejected by the API: {errors}",
                url=url,
                status_code=response.status_code,
            )
        return payload.get("result")

    async def fetch_models(self) -> list[ModelDescriptor]:
        result = await self._get_result(f"{self._account_path}/search")
        if not isinstance(result, list):
            raise TransportError("Model search returned no result list", url=f"{self._account_path}/search")
        try:
            models = [ModelDescriptor.model_validate(item) for item in result]
        except ValidationError as exc:
            raise TransportError(f"Model search returned malformed models: {exc}") from exc
        logger.debug("Fetched %d model descriptors", len(models))
        return models

    async def fetch_schema(self, model_name: str) -> SchemaPair:
        result = await self._get_result(f"{self._account_path}/schema", params={"model": model_name})
        if result is None:
            return SchemaPair()
        try:
            return SchemaPair.model_validate(result)
        except ValidationError as exc:
            raise TransportError(f"Schema for {model_name} is malformed: {exc}") from exc
