"""Integration tests for the Semantic SEO engine.

Covers module imports, the analyze_page pipeline, the application facade,
configuration loading, CLI smoke tests, and syntax validation of every
Python file in the project.
"""

import ast
import importlib
import json
import os
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Project root (conftest.py already puts it on sys.path)
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent


# ===========================================================================
# 1. Module imports
# ===========================================================================
class TestModuleImports:
    """All top-level module packages should be importable."""

    @pytest.mark.parametrize("module_path,class_names", [
        ("src.modules.semantic_analysis", [
            "SemanticAnalyzer", "EntityExtractor", "TermFrequencyAnalyzer",
            "CoreTopicIdentifier", "SemanticRelationshipMapper", "EEATScorer",
            "QueryFanOutAnalyzer", "ContentSignalAnalyzer", "HeuristicTables",
        ]),
        ("src.modules.keyword_inference", ["KeywordInferenceEngine", "PRIMARY_GENERATORS"]),
        ("src.models", [
            "PageSignals", "SemanticAnalysis", "InferredKeywords", "EEATScore",
        ]),
    ])
    def test_module_importable(self, module_path, class_names):
        mod = importlib.import_module(module_path)
        for cls_name in class_names:
            assert hasattr(mod, cls_name), (
                "Class " + cls_name + " not found in " + module_path
            )

    def test_app_importable(self):
        from src.app import SEOSemanticApp
        assert SEOSemanticApp is not None


# ===========================================================================
# 2. analyze_page pipeline
# ===========================================================================
class TestAnalyzePage:
    """End-to-end payload in, plain dict out."""

    def test_result_shape(self, seo_payload):
        from src.pipeline import analyze_page
        result = analyze_page(seo_payload)
        assert set(result) == {"semantic_analysis", "inferred_keywords"}
        assert set(result["inferred_keywords"]) == {"primary", "secondary"}
        main_topic = result["semantic_analysis"]["core_topic_analysis"]["main_topic"]
        assert main_topic["topic"] == "seo optimization"

    def test_byte_identical_runs(self, rich_payload):
        from src.pipeline import analyze_page
        first = json.dumps(analyze_page(rich_payload), sort_keys=True)
        second = json.dumps(analyze_page(rich_payload), sort_keys=True)
        assert first == second

    def test_input_not_mutated(self, rich_payload):
        import copy
        from src.pipeline import analyze_page
        before = copy.deepcopy(rich_payload)
        analyze_page(rich_payload)
        assert rich_payload == before

    def test_invalid_payload(self):
        from src.pipeline import analyze_page
        from src.utils.validators import InvalidInputError
        with pytest.raises(InvalidInputError):
            analyze_page("not a payload")

    def test_top_terms_override(self, rich_payload):
        from src.pipeline import analyze_page
        result = analyze_page(rich_payload, top_terms=3)
        assert len(result["semantic_analysis"]["top_frequent_terms"]) == 3


# ===========================================================================
# 3. Application facade
# ===========================================================================
class TestSEOSemanticApp:
    """initialize / analyze_page / get_status lifecycle."""

    def _make_app(self, config_path, tmp_path):
        from src.app import SEOSemanticApp
        return SEOSemanticApp(
            config_path=str(config_path),
            env_path=str(tmp_path / "missing.env"),
        )

    def test_requires_initialize(self, tmp_path, settings_file):
        app = self._make_app(settings_file, tmp_path)
        with pytest.raises(RuntimeError, match="initialize"):
            app.analyze_page({"content": ""})
        with pytest.raises(RuntimeError):
            app.get_status()

    def test_initialize_loads_config(self, tmp_path, settings_file, monkeypatch, seo_payload):
        monkeypatch.delenv("SEO_SEMANTIC_HEURISTICS", raising=False)
        app = self._make_app(settings_file, tmp_path)
        app.initialize()
        assert app.config["app"]["name"] == "Semantic SEO Analyzer"
        assert app.tables.version == "2024.1"
        assert app.top_terms == 5
        result = app.analyze_page(seo_payload)
        assert len(result["semantic_analysis"]["top_frequent_terms"]) <= 5

    def test_missing_config_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SEO_SEMANTIC_HEURISTICS", raising=False)
        app = self._make_app(tmp_path / "nope.yaml", tmp_path)
        app.initialize()
        assert app.config == {}
        assert app.top_terms == 50
        status = app.get_status()
        assert status["config"]["status"] == "warning"
        assert status["heuristics"]["status"] == "ok"

    def test_env_override_for_heuristics(self, tmp_path, settings_file, monkeypatch):
        from src.utils.validators import InvalidInputError
        monkeypatch.setenv("SEO_SEMANTIC_HEURISTICS", str(tmp_path / "absent.yaml"))
        app = self._make_app(settings_file, tmp_path)
        with pytest.raises(InvalidInputError):
            app.initialize()

    def test_malformed_config_raises(self, tmp_path):
        from src.utils.validators import ConfigurationError
        settings = tmp_path / "settings.yaml"
        settings.write_text("app: [unclosed\n", encoding="utf-8")
        app = self._make_app(settings, tmp_path)
        with pytest.raises(ConfigurationError, match="Malformed config file"):
            app.initialize()

    def test_non_mapping_config_raises(self, tmp_path):
        from src.utils.validators import ConfigurationError
        settings = tmp_path / "settings.yaml"
        settings.write_text("- just\n- a list\n", encoding="utf-8")
        app = self._make_app(settings, tmp_path)
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            app.initialize()

    def test_invalid_log_level_raises(self, tmp_path):
        from src.utils.validators import ConfigurationError
        settings = tmp_path / "settings.yaml"
        settings.write_text("logging:\n  level: \"LOUD\"\n", encoding="utf-8")
        app = self._make_app(settings, tmp_path)
        with pytest.raises(ConfigurationError, match="logging.level"):
            app.initialize()

    def test_env_file_loaded(self, tmp_path, settings_file, monkeypatch):
        import yaml
        from src.app import SEOSemanticApp
        from src.modules.semantic_analysis.heuristics import DEFAULT_HEURISTICS_PATH

        raw = yaml.safe_load(DEFAULT_HEURISTICS_PATH.read_text(encoding="utf-8"))
        raw["version"] = "env-test"
        alt = tmp_path / "alt.yaml"
        alt.write_text(yaml.safe_dump(raw), encoding="utf-8")
        env_file = tmp_path / ".env"
        env_file.write_text("SEO_SEMANTIC_HEURISTICS=" + str(alt) + "\n", encoding="utf-8")

        monkeypatch.delenv("SEO_SEMANTIC_HEURISTICS", raising=False)
        app = SEOSemanticApp(config_path=str(settings_file), env_path=str(env_file))
        try:
            app.initialize()
            assert app.tables.version == "env-test"
        finally:
            # load_dotenv writes os.environ directly, outside monkeypatch's undo log.
            os.environ.pop("SEO_SEMANTIC_HEURISTICS", None)


# ===========================================================================
# 4. Settings YAML
# ===========================================================================
class TestSettingsYaml:
    """Configuration file should be loadable."""

    def test_settings_file_exists(self):
        settings_path = PROJECT_ROOT / "config" / "settings.yaml"
        assert settings_path.exists(), "config/settings.yaml not found"

    def test_settings_has_required_sections(self):
        import yaml
        settings_path = PROJECT_ROOT / "config" / "settings.yaml"
        with open(settings_path) as fh:
            config = yaml.safe_load(fh)
        assert isinstance(config, dict)
        for section in ("app", "logging", "analysis", "output"):
            assert section in config, (
                "Missing config section: " + section
            )

    def test_settings_app_name(self):
        import yaml
        settings_path = PROJECT_ROOT / "config" / "settings.yaml"
        with open(settings_path) as fh:
            config = yaml.safe_load(fh)
        assert config["app"]["name"] == "Semantic SEO Analyzer"
        assert config["analysis"]["top_terms"] == 50


# ===========================================================================
# 5. CLI commands (smoke test via CliRunner)
# ===========================================================================
class TestCLICommands:
    """CLI help and the main commands should work."""

    def _get_runner_and_app(self):
        from typer.testing import CliRunner
        from src.cli import app
        return CliRunner(), app

    def test_main_help(self):
        runner, cli_app = self._get_runner_and_app()
        result = runner.invoke(cli_app, ["--help"])
        assert result.exit_code == 0
        assert "Semantic SEO" in result.output

    @pytest.mark.parametrize("command", ["analyze", "heuristics", "status"])
    def test_command_help(self, command):
        runner, cli_app = self._get_runner_and_app()
        result = runner.invoke(cli_app, [command, "--help"])
        assert result.exit_code == 0, (
            "Command '" + command + "' --help failed with exit code "
            + str(result.exit_code) + ": " + result.output
        )

    def test_analyze_writes_json(self, tmp_path, settings_file, seo_payload, monkeypatch):
        monkeypatch.delenv("SEO_SEMANTIC_HEURISTICS", raising=False)
        runner, cli_app = self._get_runner_and_app()
        payload_file = tmp_path / "page.json"
        payload_file.write_text(json.dumps(seo_payload), encoding="utf-8")
        out_file = tmp_path / "result.json"

        result = runner.invoke(cli_app, [
            "analyze", str(payload_file),
            "--output", str(out_file),
            "--config", str(settings_file),
        ])
        assert result.exit_code == 0, result.output
        data = json.loads(out_file.read_text(encoding="utf-8"))
        primary = data["inferred_keywords"]["primary"]["keywords"]
        assert primary[0]["term"] == "seo optimization"

    def test_analyze_renders_tables(self, tmp_path, settings_file, seo_payload, monkeypatch):
        monkeypatch.delenv("SEO_SEMANTIC_HEURISTICS", raising=False)
        runner, cli_app = self._get_runner_and_app()
        payload_file = tmp_path / "page.json"
        payload_file.write_text(json.dumps(seo_payload), encoding="utf-8")
        result = runner.invoke(cli_app, [
            "analyze", str(payload_file), "--config", str(settings_file),
        ])
        assert result.exit_code == 0, result.output
        assert "Primary Keywords" in result.output

    def test_analyze_invalid_json(self, tmp_path, settings_file):
        runner, cli_app = self._get_runner_and_app()
        payload_file = tmp_path / "broken.json"
        payload_file.write_text("{not json", encoding="utf-8")
        result = runner.invoke(cli_app, [
            "analyze", str(payload_file), "--config", str(settings_file),
        ])
        assert result.exit_code == 1

    def test_analyze_invalid_payload(self, tmp_path, settings_file):
        runner, cli_app = self._get_runner_and_app()
        payload_file = tmp_path / "bad.json"
        payload_file.write_text(json.dumps({"content": 42}), encoding="utf-8")
        result = runner.invoke(cli_app, [
            "analyze", str(payload_file), "--config", str(settings_file),
        ])
        assert result.exit_code == 1

    def test_analyze_missing_file(self, tmp_path, settings_file):
        runner, cli_app = self._get_runner_and_app()
        result = runner.invoke(cli_app, [
            "analyze", str(tmp_path / "absent.json"), "--config", str(settings_file),
        ])
        assert result.exit_code == 1

    def test_heuristics_command(self, settings_file, monkeypatch):
        monkeypatch.delenv("SEO_SEMANTIC_HEURISTICS", raising=False)
        runner, cli_app = self._get_runner_and_app()
        result = runner.invoke(cli_app, ["heuristics", "--config", str(settings_file)])
        assert result.exit_code == 0, result.output
        assert "2024.1" in result.output

    def test_status_command(self, settings_file, monkeypatch):
        monkeypatch.delenv("SEO_SEMANTIC_HEURISTICS", raising=False)
        runner, cli_app = self._get_runner_and_app()
        result = runner.invoke(cli_app, ["status", "--config", str(settings_file)])
        assert result.exit_code == 0, result.output
        assert "Heuristics" in result.output

    @pytest.mark.parametrize("settings_text", [
        "app: [unclosed\n",
        "logging:\n  level: \"LOUD\"\n",
    ])
    def test_bad_settings_exit_cleanly(self, tmp_path, settings_text, monkeypatch):
        monkeypatch.delenv("SEO_SEMANTIC_HEURISTICS", raising=False)
        settings = tmp_path / "settings.yaml"
        settings.write_text(settings_text, encoding="utf-8")
        runner, cli_app = self._get_runner_and_app()
        result = runner.invoke(cli_app, ["status", "--config", str(settings)])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert not isinstance(result.exception, ValueError)


# ===========================================================================
# 6. All Python files syntax validation
# ===========================================================================
class TestAllPythonFilesSyntax:
    """Every .py file in src/ and tests/ should pass ast.parse."""

    def _collect_python_files(self):
        files = []
        for directory in ("src", "tests"):
            base = PROJECT_ROOT / directory
            if base.exists():
                for py_file in base.rglob("*.py"):
                    # Skip venv and __pycache__
                    parts = py_file.parts
                    if "venv" in parts or "__pycache__" in parts:
                        continue
                    files.append(py_file)
        return sorted(files)

    def test_all_python_files_parse(self):
        py_files = self._collect_python_files()
        assert len(py_files) > 0, "No Python files found"
        errors = []
        for py_file in py_files:
            try:
                source = py_file.read_text(encoding="utf-8")
                ast.parse(source)
            except SyntaxError as exc:
                rel = py_file.relative_to(PROJECT_ROOT)
                errors.append(str(rel) + ": " + str(exc))
        if errors:
            msg = "Python syntax errors found in " + str(len(errors)) + " files:\n"
            msg += "\n".join(errors[:20])
            pytest.fail(msg)


# ===========================================================================
# 7. Requirements / key packages importable
# ===========================================================================
class TestRequirementsInstallable:
    """Key packages from requirements.txt should be importable."""

    @pytest.mark.parametrize("package", [
        "typer",
        "rich",
        "yaml",  # PyYAML
        "dotenv",  # python-dotenv
    ])
    def test_package_importable(self, package):
        try:
            importlib.import_module(package)
        except ImportError:
            pytest.skip("Package not installed: " + package)
