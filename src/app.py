"""Main application facade for the Semantic SEO engine."""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from src.modules.semantic_analysis.heuristics import HeuristicTables, load_heuristics
from src.pipeline import analyze_page
from src.utils.validators import ConfigurationError

logger = logging.getLogger(__name__)

HEURISTICS_ENV_VAR = "SEO_SEMANTIC_HEURISTICS"
DEFAULT_TOP_TERMS = 50


class SEOSemanticApp:
    """Load configuration once, then analyse any number of pages.

    Usage::

        app = SEOSemanticApp()
        app.initialize()
        result = app.analyze_page(payload)
        status = app.get_status()
    """

    def __init__(
        self,
        config_path: str = "config/settings.yaml",
        env_path: str = ".env",
    ):
        self._config_path = config_path
        self._env_path = env_path
        self.config: dict[str, Any] = {}
        self.tables: Optional[HeuristicTables] = None
        self._initialized = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Load environment, configuration and heuristic tables.

        Raises:
            ConfigurationError: If settings.yaml is malformed or sets an
                unknown ``logging.level``.
            InvalidInputError: If the heuristic tables cannot be loaded.
        """
        if self._initialized:
            return

        env_file = Path(self._env_path)
        if env_file.exists():
            load_dotenv(env_file)
            logger.info("Loaded environment from %s", self._env_path)

        self.config = self._load_config()

        level = self.config.get("logging", {}).get("level")
        if level:
            try:
                logging.getLogger("src").setLevel(str(level).upper())
            except ValueError as exc:
                raise ConfigurationError(f"Invalid logging.level {level!r}: {exc}") from exc

        self.tables = load_heuristics(self.heuristics_path)

        self._initialized = True
        logger.info("SEOSemanticApp initialised (heuristics %s).", self.tables.version)

    def _load_config(self) -> dict[str, Any]:
        """Load the YAML configuration file."""
        config_file = Path(self._config_path)
        if not config_file.exists():
            logger.warning("Config file not found: %s, using defaults.", self._config_path)
            return {}
        try:
            with open(config_file, "r", encoding="utf-8") as fh:
                config = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Malformed config file {self._config_path}: {exc}") from exc
        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Config file {self._config_path} must contain a mapping, "
                f"got {type(config).__name__}."
            )
        logger.info("Configuration loaded from %s", self._config_path)
        return config

    @property
    def heuristics_path(self) -> Optional[str]:
        """Heuristics file override: env var first, then ``analysis.heuristics_path``."""
        override = os.getenv(HEURISTICS_ENV_VAR)
        if override:
            return override
        return self.config.get("analysis", {}).get("heuristics_path") or None

    @property
    def top_terms(self) -> int:
        return int(self.config.get("analysis", {}).get("top_terms", DEFAULT_TOP_TERMS))

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def analyze_page(self, payload: Any) -> dict[str, Any]:
        """Analyse one parser payload.

        Returns:
            Dict with ``semantic_analysis`` and ``inferred_keywords``.

        Raises:
            InvalidInputError: If the payload is malformed.
        """
        self._ensure_initialized()
        return analyze_page(payload, tables=self.tables, top_terms=self.top_terms)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def get_status(self) -> dict[str, dict[str, Any]]:
        """Return load status of configuration and heuristic tables."""
        self._ensure_initialized()
        status: dict[str, dict[str, Any]] = {}

        status["config"] = {
            "status": "ok" if self.config else "warning",
            "details": f"{len(self.config)} sections loaded" if self.config else "no config",
        }

        summary = self.tables.summary()
        status["heuristics"] = {
            "status": "ok",
            "details": (
                f"version {summary['version']}, {summary['stop_words']} stop words, "
                f"from {self.tables.source}"
            ),
        }

        override = os.getenv(HEURISTICS_ENV_VAR)
        status["environment"] = {
            "status": "ok",
            "details": f"{HEURISTICS_ENV_VAR}={override}" if override else "no overrides",
        }
        return status

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("Call initialize() before using the application.")
