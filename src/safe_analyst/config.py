"""YAML/dict settings loader for safe-analyst.

Supports loading from a YAML file or a plain dict (for embedding in a
larger application config).

Example YAML:

    safe_analyst:
      phone_region: GB
      detectors:
        - phone
        - email
        - ipv4
      export:
        indent: 2
        filename: safe-analyst-config.json
      log_level: INFO
"""

from __future__ import annotations
from pathlib import Path
from typing import Any

import yaml

from .patterns import default_detectors
from .serializer import DEFAULT_EXPORT_FILENAME
from .session import MaskingSession


def load_config(data: dict[str, Any] | None) -> dict[str, Any]:
    """Normalize a settings dict (from YAML or inline)."""
    data = data or {}
    if not isinstance(data, dict):
        raise ValueError(f"settings must be a mapping, got {type(data).__name__}")
    # Support nested under "safe_analyst" key or flat
    if "safe_analyst" in data:
        data = data["safe_analyst"] or {}
        if not isinstance(data, dict):
            raise ValueError("'safe_analyst' settings must be a mapping")

    export = data.get("export") or {}
    detectors = data.get("detectors")
    return {
        "phone_region": str(data.get("phone_region", "US")).upper(),
        "detectors": [d.lower() for d in detectors] if detectors else None,
        "export_indent": export.get("indent", 2),
        "export_filename": export.get("filename", DEFAULT_EXPORT_FILENAME),
        "log_level": str(data.get("log_level", "WARNING")).upper(),
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load settings from a YAML file."""
    with open(Path(path).expanduser()) as f:
        return load_config(yaml.safe_load(f))


def create_session(config: dict[str, Any] | None = None, *, text: str = "") -> MaskingSession:
    """Create a configured session from a settings dict."""
    # already-normalized dicts carry "export_indent"; raw ones never do
    cfg = config if config and "export_indent" in config else load_config(config)

    available = default_detectors(cfg["phone_region"])
    if cfg["detectors"] is not None:
        unknown = [n for n in cfg["detectors"] if n not in available]
        if unknown:
            raise ValueError(
                f"Unknown detectors {unknown} (known: {', '.join(available)})"
            )
        available = {n: available[n] for n in cfg["detectors"]}

    session = MaskingSession.create(text=text, detectors=available)
    session.export_indent = cfg["export_indent"]
    session.export_filename = cfg["export_filename"]
    return session
