"""
Display label lookup.

Labels are loaded from YAML: the bundled ``labels.yaml`` plus an optional
override file (for localization) whose entries replace bundled ones.
Identifiers that have no label are displayed by their own name, so a
missing entry is never an error.
"""

from __future__ import annotations

import importlib.resources
import logging
from collections.abc import Mapping
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _load_bundled_labels() -> dict[str, str]:
    text = (
        importlib.resources.files("migration_console")
        .joinpath("labels.yaml")
        .read_text(encoding="utf-8")
    )
    return _parse_labels(yaml.safe_load(text), source="labels.yaml")


def _parse_labels(data: Any, source: str) -> dict[str, str]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Label file {source} must contain a mapping")
    return {str(key): str(value) for key, value in data.items()}


def load_label_file(path: Path) -> dict[str, str]:
    """Load a YAML label file into a flat key → label mapping."""
    with open(path, encoding="utf-8") as f:
        return _parse_labels(yaml.safe_load(f), source=str(path))


def identifier_name(value: Any) -> str:
    """Textual name of an identifier: enum member name or ``str(value)``."""
    if isinstance(value, Enum):
        return value.name
    return str(value)


class LabelCatalog:
    """Resolve identifiers and message keys to display strings."""

    def __init__(self, labels: Mapping[str, str] | None = None) -> None:
        self._labels: dict[str, str] = dict(labels or {})

    @classmethod
    def load(cls, override: Path | None = None) -> LabelCatalog:
        """Bundled labels, with entries from ``override`` taking precedence."""
        labels = dict(_load_bundled_labels())
        if override is not None:
            labels.update(load_label_file(override))
            logger.debug(f"Loaded label overrides from {override}")
        return cls(labels)

    def __contains__(self, key: str) -> bool:
        return key in self._labels

    def lookup(self, key: str) -> str | None:
        """Label for ``key``, or None when no label is registered."""
        return self._labels.get(key)

    def label(self, value: Any) -> str:
        """Display string for an identifier, falling back to its name."""
        name = identifier_name(value)
        label = self.lookup(name)
        if label is None:
            logger.debug(f"No label for {name!r}, using name")
            return name
        return label

    def format(self, key: str, **kwargs: Any) -> str:
        """Format the label registered under ``key``.

        An unregistered key is used as the format string itself.
        """
        return self.label(key).format(**kwargs)

    def count_message(self, count: int, singular_key: str, plural_key: str) -> str:
        """Singular message when ``count`` is 1, else the plural format."""
        if count == 1:
            return self.label(singular_key)
        return self.format(plural_key, count=count)

    def orphan_mappings(self, behavior: Any, count: int) -> str:
        """Label for an orphan mapping run of ``count`` items.

        Uses the ``<Behavior>OrphanMappings`` format when registered, then
        the generic ``OrphanMappings`` format, then a plain
        thousands-separated count.
        """
        template = self.lookup(f"{identifier_name(behavior)}OrphanMappings")
        if template is None:
            template = self.lookup("OrphanMappings") or "{count:,}"
        return template.format(count=count)
