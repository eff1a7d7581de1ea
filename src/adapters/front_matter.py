"""Serialización del front matter (YAML).

Por qué está en adapters:
- YAML es un detalle de formato; el Core solo conoce `DocumentParams`.
"""

from __future__ import annotations

import yaml

from core.domain.models import DocumentParams

DELIMITER = "---"


def dump_front_matter(params: DocumentParams) -> str:
    """YAML legible, en el orden de los campos y sin escapar unicode."""

    payload = params.model_dump(mode="json")
    return yaml.safe_dump(
        payload,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def render_document(params: DocumentParams, *, body: str = "") -> str:
    """Front matter entre marcadores `---`, seguido del cuerpo opcional."""

    content = f"{DELIMITER}\n{dump_front_matter(params)}{DELIMITER}\n"
    if body:
        content += f"\n{body.rstrip()}\n"
    return content


def parse_front_matter(content: str) -> dict:
    """Inverso de `render_document` para el bloque de front matter."""

    lines = content.splitlines()
    if not lines or lines[0] != DELIMITER:
        raise ValueError("document does not start with a front matter delimiter")
    try:
        end = lines.index(DELIMITER, 1)
    except ValueError as exc:
        raise ValueError("front matter is not closed") from exc
    data = yaml.safe_load("\n".join(lines[1:end]))
    return data if isinstance(data, dict) else {}
