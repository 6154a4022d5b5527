from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any, Mapping

import tomllib

from .theme import ThemeTokens, validate_theme_tokens


@dataclass(frozen=True)
class WidgetDocument:
    widget: Mapping[str, Any]
    theme: ThemeTokens


def load_widget_document(path: str | Path) -> WidgetDocument:
    """Load a widget description from a `.toml` or `.json` file.

    Both formats hold a `widget` table plus an optional `theme` table of
    token overrides. A JSON file may also be a bare widget object.
    """

    doc_path = Path(path)
    if not doc_path.exists():
        raise FileNotFoundError(f"widget file not found: {doc_path}")
    if doc_path.suffix == ".toml":
        with doc_path.open("rb") as f:
            raw: Any = tomllib.load(f)
    elif doc_path.suffix == ".json":
        raw = json.loads(doc_path.read_text(encoding="utf-8"))
    else:
        raise ValueError(f"unsupported widget file type: {doc_path.suffix}")
    return parse_widget_document(raw)


def parse_widget_document(raw: Any) -> WidgetDocument:
    if not isinstance(raw, Mapping):
        raise ValueError("widget document must be a table/object")
    if "widget" in raw:
        widget = raw["widget"]
        theme_overrides = raw.get("theme")
    else:
        widget = raw
        theme_overrides = None
    if not isinstance(widget, Mapping):
        raise ValueError("`widget` must be a table/object")
    if theme_overrides is not None and not isinstance(theme_overrides, Mapping):
        raise ValueError("`theme` must be a table/object")
    return WidgetDocument(widget=widget, theme=validate_theme_tokens(theme_overrides))
