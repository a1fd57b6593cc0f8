from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

API_KEY_ENV = "OPENAI_API_KEY"
DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4"
DEFAULT_INSTRUCTION = (
    "Auto-correct and enrich this table, return JSON "
    "{ group, parameters: [{ offset, name, description, bits, values }] }"
)


@dataclass
class EnrichmentConfig:
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    endpoint: str = DEFAULT_ENDPOINT
    temperature: float = 0.0
    max_tokens: int = 1000
    timeout: float | None = None  # no timeout unless configured
    instruction: str = DEFAULT_INSTRUCTION

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> EnrichmentConfig:
        known = {f.name for f in fields(EnrichmentConfig)}
        return EnrichmentConfig(**{k: v for k, v in payload.items() if k in known})


def resolve_api_key(explicit: str | None = None) -> str | None:
    """Explicit key first, then the ``OPENAI_API_KEY`` environment variable."""
    return explicit or os.environ.get(API_KEY_ENV) or None


def load_config(path: Path) -> EnrichmentConfig:
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")
    if path.suffix.lower() in {".yml", ".yaml"}:
        payload = yaml.safe_load(path.read_text())
    else:
        payload = json.loads(path.read_text())
    if not isinstance(payload, dict):
        raise ValueError(f"Config file must hold a mapping: {path}")
    return EnrichmentConfig.from_mapping(payload)
