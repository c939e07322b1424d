"""Helpers for resolving the converter config file and runtime paths."""

import json
import os
from typing import Any, Dict, Optional

DEFAULT_CONFIG_NAME = "config.json"
CONFIG_ENV_VAR = "HTML_TO_PDF_CONFIG"
PATH_KEY_SUFFIXES = ("_html", "_pdf", "_dir", "_path")


class ConfigError(Exception):
    """Raised when runtime configuration cannot be loaded."""


class ConfigNotFoundError(ConfigError):
    """Raised when no config file exists at any searched location."""


def _resolve_config_path(path: Optional[str]) -> str:
    """Return the absolute config path, honoring overrides and defaults."""
    env_override = os.environ.get(CONFIG_ENV_VAR)
    candidate = path or env_override or DEFAULT_CONFIG_NAME
    expanded = os.path.expanduser(candidate)
    if os.path.isabs(expanded):
        if os.path.isfile(expanded):
            return expanded
        raise ConfigNotFoundError(f"Configuration file not found: {candidate}")

    for root in (os.getcwd(), os.path.dirname(os.path.abspath(__file__))):
        resolved = os.path.abspath(os.path.join(root, expanded))
        if os.path.isfile(resolved):
            return resolved

    raise ConfigNotFoundError(f"Configuration file not found: {candidate}")


def _resolve_path(value: str, base_dir: str) -> str:
    """Resolve ``value`` into an absolute path relative to ``base_dir``."""
    expanded = os.path.expanduser(value)
    if os.path.isabs(expanded):
        return expanded
    return os.path.abspath(os.path.join(base_dir, expanded))


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load a JSON config file and normalize any filesystem paths."""
    config_path = _resolve_config_path(path)
    try:
        with open(config_path, "r", encoding="utf-8") as config_file:
            data = json.load(config_file)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be an object: {config_path}")

    base_dir = os.path.dirname(config_path)
    resolved: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str) and key.endswith(PATH_KEY_SUFFIXES):
            resolved[key] = _resolve_path(value, base_dir)
        else:
            resolved[key] = value

    conversion = resolved.get("pdf_conversion")
    if conversion is not None and not isinstance(conversion, dict):
        raise ConfigError("pdf_conversion must be an object.")

    return resolved


def resolve_runtime_paths(
    *,
    config_path: Optional[str] = None,
    input_html: Optional[str] = None,
    output_pdf: Optional[str] = None,
) -> Dict[str, Any]:
    """Resolve runtime arguments by combining CLI overrides with config.

    A missing config file is tolerated when both paths come from the
    caller; an explicitly requested config must exist, and a config that
    exists but fails to parse always raises.
    """
    try:
        config = load_config(config_path)
    except ConfigNotFoundError:
        explicit = config_path or os.environ.get(CONFIG_ENV_VAR)
        if explicit or not (input_html and output_pdf):
            raise
        config = {}

    resolved_input = input_html or config.get("input_html")
    resolved_output = output_pdf or config.get("output_pdf")

    if not resolved_input:
        raise ConfigError("Missing input_html configuration.")
    if not resolved_output:
        raise ConfigError("Missing output_pdf configuration.")

    return {
        "input_html": _resolve_path(resolved_input, os.getcwd()),
        "output_pdf": _resolve_path(resolved_output, os.getcwd()),
        "pdf_conversion": dict(config.get("pdf_conversion") or {}),
    }
