"""
Utility script to write the OpenAPI schema of the task API to disk.

The schema is produced from an app built with the in-memory backend, so no
database is needed.

Usage:
    python -m task_api.generate_openapi [output_path]

Default output path: interfaces/openapi.json under the current directory.
"""
from __future__ import annotations

import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from .main import create_app, openapi_tags
from .repositories import InMemoryRepository
from .settings import get_settings

DEFAULT_OUTPUT = Path("interfaces") / "openapi.json"


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Make sure every tag in openapi_tags is described in the schema without
    overriding tags that are already present.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


# PUBLIC_INTERFACE
def build_schema() -> Dict[str, Any]:
    """Return the OpenAPI schema of the task API as a dict."""
    settings = replace(get_settings(), persistence_backend="memory")
    schema = create_app(settings, repository=InMemoryRepository()).openapi()
    _ensure_tags(schema)
    return schema


# PUBLIC_INTERFACE
def generate_openapi(out_path: Optional[Path] = None) -> Path:
    """Write the OpenAPI schema file, creating directories as needed, and return its path."""
    path = Path(out_path) if out_path is not None else DEFAULT_OUTPUT
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(build_schema(), f, indent=2, ensure_ascii=False)
    return path


def main(argv: Optional[List[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    path = generate_openapi(Path(args[0]) if args else None)
    print(f"Wrote OpenAPI schema to: {path}")


if __name__ == "__main__":
    main()
