"""
Environment & search settings.

Env vars are read through python-dotenv so a local .env works the same as
the container environment. The entity mapping table is loaded ONCE and
cached; the returned SearchSettings is frozen.
"""

import json
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from voicecart.shared.schemas_pydantic import SearchSettings

load_dotenv()  # Load environment variables from .env file

DEFAULT_SETTINGS_PATH = Path("config") / "search_settings.json"


def _get_env_var(name: str) -> str:
    """Return required environment variable or raise a value error early."""
    value = os.getenv(name)

    if value is None or value.strip() == "":
        raise ValueError(f"Environment var '{name}' must be set & non-empty")

    return value


def get_search_endpoint() -> str:
    """Azure AI Search service endpoint, e.g. https://<name>.search.windows.net"""
    return _get_env_var("AZURE_SEARCH_ENDPOINT")


def get_search_api_key() -> str | None:
    """Admin/query key. When unset, managed identity is used instead."""
    return os.getenv("AZURE_SEARCH_API_KEY") or None


def load_search_settings(path: str | Path) -> SearchSettings:
    """Read and validate a search settings JSON file.

    Expected shape:
        {"index": "products", "entities": [{"entity": "color", "scope": "colors", "sku": "color"}]}

    AZURE_SEARCH_INDEX, when set, overrides the index name from the file.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))

    index_override = os.getenv("AZURE_SEARCH_INDEX")
    if index_override:
        raw["index"] = index_override

    settings = SearchSettings.model_validate(raw)
    logger.info(
        "Search settings loaded | path={} | index={} | entity_mappings={}",
        path, settings.index, len(settings.entities),
    )
    return settings


@lru_cache(maxsize=1)  # Load once per process, the result is immutable
def get_search_settings() -> SearchSettings:
    """Process-wide search settings from VOICECART_SEARCH_SETTINGS
    (default: config/search_settings.json)."""
    path = os.getenv("VOICECART_SEARCH_SETTINGS") or str(DEFAULT_SETTINGS_PATH)
    return load_search_settings(path)
