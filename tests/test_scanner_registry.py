"""
Tests for ScannerRegistry capability lookup and scanner selection.
"""

from pathlib import Path

import pytest

from codescrub.core.errors import ConfigError, UnsupportedFileType
from codescrub.core.scanners import (
    CFamilyScanner,
    HtmlScanner,
    PythonScanner,
    ScannerRegistry,
    SourceKind,
    TypeScriptScanner,
    get_default_registry,
    get_scanner,
    scrub,
)


class TestDetection:
    """Default capabilities from languages.yaml."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Program.cs", SourceKind.C_FAMILY),
            ("Main.JAVA", SourceKind.C_FAMILY),
            ("util.hpp", SourceKind.C_FAMILY),
            ("app.component.ts", SourceKind.TYPESCRIPT),
            ("index.tsx", SourceKind.TYPESCRIPT),
            ("server.mjs", SourceKind.TYPESCRIPT),
            ("manage.py", SourceKind.PYTHON),
            ("app.component.html", SourceKind.HTML),
            ("styles.scss", SourceKind.CSS),
        ],
    )
    def test_detects_kind(self, name, expected):
        assert get_default_registry().detect(Path("src") / name) is expected

    def test_unknown_extension(self):
        registry = get_default_registry()
        assert registry.detect("README.md") is None
        assert not registry.handles("README.md")

    def test_select_returns_scanner(self):
        registry = get_default_registry()
        assert isinstance(registry.select("a.cs"), CFamilyScanner)
        assert isinstance(registry.select("a.component.ts"), TypeScriptScanner)
        assert isinstance(registry.select("page.htm"), HtmlScanner)

    def test_select_unsupported_raises(self):
        with pytest.raises(UnsupportedFileType) as exc_info:
            get_default_registry().select("notes.txt")
        assert exc_info.value.path == Path("notes.txt")
        assert "notes.txt" in str(exc_info.value)


class TestRegistration:
    def test_registration_order_decides(self):
        registry = ScannerRegistry(load_defaults=False)
        registry.register("css", ["*.ts"]).register(SourceKind.TYPESCRIPT, ["*.ts"])
        assert registry.detect("a.ts") is SourceKind.CSS

    def test_patterns_are_lowercased_and_deduplicated(self):
        registry = ScannerRegistry(load_defaults=False)
        registry.register("python", ["*.PY", "*.py"])
        assert registry.patterns_for("python") == ["*.py"]

    def test_unknown_kind_rejected(self):
        with pytest.raises(ConfigError, match="Unknown source kind"):
            ScannerRegistry(load_defaults=False).register("cobol", ["*.cbl"])

    def test_unregister(self):
        registry = ScannerRegistry()
        registry.unregister(SourceKind.PYTHON)
        assert SourceKind.PYTHON not in registry.kinds
        assert registry.detect("a.py") is None

    def test_default_kinds_in_order(self):
        assert ScannerRegistry().kinds == [
            SourceKind.C_FAMILY,
            SourceKind.TYPESCRIPT,
            SourceKind.PYTHON,
            SourceKind.HTML,
            SourceKind.CSS,
        ]


class TestFromYaml:
    def test_custom_file(self, tmp_path):
        config = tmp_path / "languages.yaml"
        config.write_text('python:\n  - "*.py"\n  - "*.pyi"\n', encoding="utf-8")

        registry = ScannerRegistry.from_yaml(config)

        assert registry.kinds == [SourceKind.PYTHON]
        assert registry.detect("stub.pyi") is SourceKind.PYTHON
        assert registry.detect("a.cs") is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ScannerRegistry.from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        config = tmp_path / "languages.yaml"
        config.write_text("python: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            ScannerRegistry.from_yaml(config)

    def test_non_mapping_rejected(self, tmp_path):
        config = tmp_path / "languages.yaml"
        config.write_text("- '*.py'\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            ScannerRegistry.from_yaml(config)

    def test_non_list_patterns_skipped(self, tmp_path):
        config = tmp_path / "languages.yaml"
        config.write_text('python: "*.py"\ncss:\n  - "*.css"\n', encoding="utf-8")
        registry = ScannerRegistry.from_yaml(config)
        assert registry.kinds == [SourceKind.CSS]


def test_get_scanner_accepts_strings():
    assert isinstance(get_scanner("python"), PythonScanner)
    assert get_scanner(SourceKind.C_FAMILY) is get_scanner("c_family")


def test_module_level_scrub():
    assert scrub("x = 1  # note", "python") == "x = 1"
