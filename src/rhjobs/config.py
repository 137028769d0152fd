# src/rhjobs/config.py
"""
Run settings, read once at start.

Where values come from, lowest to highest precedence:
1. defaults below
2. environment (RH_* variables; the CLI loads a .env file first)
3. an Apify-style JSON input file (keyword, jobType, results_wanted, ...)
4. explicit CLI options

Bad numbers are not fatal (they fall back to defaults). An input file we
can't read or parse is: that raises ConfigError.
"""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from rhjobs.models import PAGE_SIZE, RunBudget, SearchQuery

DEFAULT_RESULTS_WANTED = 100
DEFAULT_MAX_PAGES = 20
DEFAULT_OUTPUT_DIR = "storage"

# input-file key -> settings field
INPUT_KEYS = {
    "keyword": "keyword",
    "location": "location",
    "specialization": "specialization",
    "jobType": "job_type",
    "remote": "remote",
    "results_wanted": "results_wanted",
    "max_pages": "max_pages",
    "collectDetails": "collect_details",
    "proxyConfiguration": "proxy",
}

ENV_KEYS = {
    "RH_KEYWORD": "keyword",
    "RH_LOCATION": "location",
    "RH_SPECIALIZATION": "specialization",
    "RH_JOB_TYPE": "job_type",
    "RH_REMOTE": "remote",
    "RH_RESULTS_WANTED": "results_wanted",
    "RH_MAX_PAGES": "max_pages",
    "RH_COLLECT_DETAILS": "collect_details",
    "RH_PROXY_URL": "proxy",
    "RH_OUTPUT_DIR": "output_dir",
}


class ConfigError(ValueError):
    """Setup problem we can't recover from."""


def coerce_positive_int(value: Any, default: int) -> int:
    """'5' -> 5, 0 -> 1, 'lots' -> default, None -> default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        num = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(num):
        return default
    return max(1, int(num))


def coerce_bool(value: Any, default: bool = True) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on", "y"):
        return True
    if text in ("0", "false", "no", "off", "n", ""):
        return False
    return default


def proxy_url(value: Any) -> Optional[str]:
    """
    Proxy config is passed through to httpx as-is. Accepts a URL string or an
    Apify-style {"proxyUrls": [...]} object (first URL is used).
    """
    if not value:
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, Mapping):
        urls = value.get("proxyUrls") or []
        if isinstance(urls, list) and urls:
            return str(urls[0])
        if value.get("proxy_url"):
            return str(value["proxy_url"])
    return None


@dataclass(frozen=True)
class Settings:
    query: SearchQuery
    budget: RunBudget
    collect_details: bool = True
    proxy: Optional[str] = None
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)


def read_input_file(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read input file {path}: {e}") from e
    except ValueError as e:
        raise ConfigError(f"Input file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Input file {path} must contain a JSON object")
    return data


def _from_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    return {field: environ[key] for key, field in ENV_KEYS.items() if environ.get(key) not in (None, "")}


def _from_input(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {field: data[key] for key, field in INPUT_KEYS.items() if key in data}


def load_settings(
    input_path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    raw: Dict[str, Any] = _from_env(os.environ if environ is None else environ)
    if input_path is not None:
        raw.update(_from_input(read_input_file(input_path)))
    raw.update({k: v for k, v in (overrides or {}).items() if v is not None})

    query = SearchQuery(
        keyword=str(raw.get("keyword") or ""),
        location=str(raw.get("location") or ""),
        specialization=str(raw.get("specialization") or ""),
        job_type=str(raw.get("job_type") or ""),
        remote=str(raw.get("remote") or "Any"),
    )
    budget = RunBudget(
        results_wanted=coerce_positive_int(raw.get("results_wanted"), DEFAULT_RESULTS_WANTED),
        max_pages=coerce_positive_int(raw.get("max_pages"), DEFAULT_MAX_PAGES),
        page_size=PAGE_SIZE,
    )
    return Settings(
        query=query,
        budget=budget,
        collect_details=coerce_bool(raw.get("collect_details"), True),
        proxy=proxy_url(raw.get("proxy")),
        output_dir=Path(raw.get("output_dir") or DEFAULT_OUTPUT_DIR),
    )
