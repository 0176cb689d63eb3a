"""Versioned heuristic tables for the semantic analysis engine.

Stop words, entity anchor lists, E-E-A-T indicators and every scoring weight
live in ``data/heuristics.yaml``.  They are loaded once per path into a frozen
:class:`HeuristicTables` instance so that scoring code never mutates them and
an alternative table can be swapped in without touching any analyzer.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

import yaml

from src.utils.validators import InvalidInputError

logger = logging.getLogger(__name__)

DEFAULT_HEURISTICS_PATH = Path(__file__).resolve().parent / "data" / "heuristics.yaml"

_REQUIRED_SECTIONS = (
    "version",
    "stop_words",
    "entities",
    "term_frequency",
    "core_topic",
    "relationships",
    "eeat",
    "fan_out",
    "content_signals",
    "keywords",
)
EEAT_CATEGORIES = ("expertise", "experience", "authoritativeness", "trustworthiness")


@dataclass(frozen=True)
class HeuristicTables:
    """Immutable view over one version of the heuristic tables."""

    version: str
    stop_words: frozenset[str]
    entities: Mapping[str, Any]
    term_frequency: Mapping[str, Any]
    core_topic: Mapping[str, Any]
    relationships: Mapping[str, Any]
    eeat: Mapping[str, Mapping[str, float]]
    fan_out: Mapping[str, Any]
    content_signals: Mapping[str, Any]
    keywords: Mapping[str, Any]
    source: str = ""

    def is_stop_word(self, token: str) -> bool:
        return token in self.stop_words

    def summary(self) -> dict[str, Any]:
        """Return vocabulary sizes, used by the CLI and status checks."""
        return {
            "version": self.version,
            "source": self.source,
            "stop_words": len(self.stop_words),
            "organization_anchors": len(self.entities["organization_anchors"]),
            "location_anchors": len(self.entities["location_anchors"]),
            "product_anchors": len(self.entities["product_anchors"]),
            "technologies": len(self.entities["technologies"]),
            "eeat_indicators": {
                cat: len(self.eeat[cat]) for cat in EEAT_CATEGORIES
            },
            "content_gaps": len(self.fan_out["content_gaps"]),
        }


# ------------------------------------------------------------------
# Loading
# ------------------------------------------------------------------

def load_heuristics(path: Optional[Union[str, Path]] = None) -> HeuristicTables:
    """Load heuristic tables from *path* (default: bundled table).

    Results are cached per resolved path.

    Raises:
        InvalidInputError: If the file is missing, unparsable or incomplete.
    """
    resolved = Path(path).expanduser().resolve() if path else DEFAULT_HEURISTICS_PATH
    return _load_cached(str(resolved))


def default_tables() -> HeuristicTables:
    """Return the bundled heuristic tables."""
    return load_heuristics(None)


@lru_cache(maxsize=8)
def _load_cached(path: str) -> HeuristicTables:
    table_file = Path(path)
    if not table_file.exists():
        raise InvalidInputError(f"Heuristics file not found: {path}")
    try:
        with open(table_file, "r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise InvalidInputError(f"Heuristics file is not valid YAML: {exc}") from exc

    if not isinstance(raw, dict):
        raise InvalidInputError("Heuristics file must contain a mapping.")
    missing = [section for section in _REQUIRED_SECTIONS if section not in raw]
    if missing:
        raise InvalidInputError(
            "Heuristics file missing section(s): " + ", ".join(missing)
        )
    eeat = raw["eeat"] or {}
    missing_eeat = [cat for cat in EEAT_CATEGORIES if cat not in eeat]
    if missing_eeat:
        raise InvalidInputError(
            "Heuristics eeat table missing categories: " + ", ".join(missing_eeat)
        )

    tables = HeuristicTables(
        version=str(raw["version"]),
        stop_words=frozenset(str(w).lower() for w in raw["stop_words"] or []),
        entities=_freeze(raw["entities"]),
        term_frequency=_freeze(raw["term_frequency"]),
        core_topic=_freeze(raw["core_topic"]),
        relationships=_freeze(raw["relationships"]),
        eeat=_freeze(eeat),
        fan_out=_freeze(raw["fan_out"]),
        content_signals=_freeze(raw["content_signals"]),
        keywords=_freeze(raw["keywords"]),
        source=path,
    )
    logger.info("Loaded heuristic tables v%s from %s", tables.version, path)
    return tables


def _freeze(value: Any) -> Any:
    """Recursively convert dicts to read-only mappings and lists to tuples."""
    if isinstance(value, dict):
        return MappingProxyType({str(k): _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value
