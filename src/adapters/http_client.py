"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza base URL, timeouts, headers y auth en un único sitio.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` autenticado contra la API.

    Por qué un builder:
    - Todas las peticiones comparten token, timeout y User-Agent.
    - Sin timeout por defecto distinto al configurado ni reintentos.
    """

    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
        "Content-Type": "application/json",
        "Authorization": f"Bearer {settings.auth_token.get_secret_value()}",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=settings.api_base_url.rstrip("/"),
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
