"""
Tests for the exclusion filter: folder rules, filename patterns and gitignore.
"""

import re
from pathlib import Path

import pytest

from codescrub.core.config import FilterConfig
from codescrub.core.filters import (
    BASE_EXCLUDED_FOLDERS,
    ExclusionFilter,
    ExclusionRule,
    RuleKind,
    compile_glob,
    glob_to_regex,
)


def _filter(**overrides) -> ExclusionFilter:
    return ExclusionFilter(FilterConfig(**overrides), case_sensitive=True)


class TestGlobTranslation:
    def test_star_and_literal_dot(self):
        assert glob_to_regex("*.cs") == r"^.*\.cs$"

    def test_character_class(self):
        assert glob_to_regex("I[A-Z]*.cs") == r"^I[A-Z].*\.cs$"

    def test_negated_class(self):
        assert glob_to_regex("[!a]b") == r"^[^a]b$"

    def test_unmatched_bracket_is_literal(self):
        assert re.fullmatch(glob_to_regex("a[b"), "a[b")

    def test_question_mark(self):
        pattern = compile_glob("file?.ts")
        assert pattern.fullmatch("file1.ts")
        assert not pattern.fullmatch("file10.ts")

    def test_case_insensitive(self):
        assert compile_glob("*.Designer.cs", case_sensitive=False).fullmatch("form.designer.cs")
        assert not compile_glob("*.Designer.cs").fullmatch("form.designer.cs")


class TestBaseFolders:
    """Build output and tooling folders are always excluded."""

    @pytest.mark.parametrize("folder", BASE_EXCLUDED_FOLDERS)
    def test_base_folder_excluded(self, folder):
        assert not _filter().should_include(Path("src") / folder / "x.cs")

    def test_plain_file_included(self):
        assert _filter().should_include(Path("src") / "App" / "Program.cs")

    def test_file_named_like_folder_included(self):
        """Folder rules match directory segments only, never the file name."""
        assert _filter().should_include(Path("src") / "bin")

    def test_backslash_paths(self):
        assert not _filter().should_include("src\\obj\\Debug\\x.cs")

    def test_folder_outside_root_ignored(self, tmp_path):
        root = tmp_path / "bin" / "app"
        root.mkdir(parents=True)
        exclusion = ExclusionFilter(FilterConfig(), root=root)
        assert exclusion.should_include(root / "src" / "main.cs")
        assert not exclusion.should_include(root / "obj" / "main.cs")

    def test_relative_path_under_relative_root(self, tmp_path, monkeypatch):
        root = tmp_path / "tests" / "app"
        (root / "src").mkdir(parents=True)
        monkeypatch.chdir(tmp_path)
        exclusion = ExclusionFilter(FilterConfig(include_tests=False), root=Path("tests/app"))
        assert exclusion.should_include(Path("tests/app/src/main.cs"))
        assert not exclusion.should_include(Path("tests/app/tests/main.cs"))


class TestOptionalRules:
    def test_tests_excluded(self):
        exclusion = _filter(include_tests=False)
        assert not exclusion.should_include("tests/test_app.py")
        assert not exclusion.should_include("src/OrderServiceTests.cs")
        assert not exclusion.should_include("src/app/app.spec.ts")
        assert not exclusion.should_include("src/app/app.test.ts")
        assert not exclusion.should_include("pkg/test_models.py")
        assert not exclusion.should_include("pkg/models_test.py")
        assert exclusion.should_include("src/Latest.cs")

    def test_test_folder_and_spec_pattern(self):
        exclusion = _filter(include_tests=False)
        assert not exclusion.should_include("src/Tests/x.ts")
        assert not exclusion.should_include("src/foo.spec.ts")
        assert exclusion.should_include("src/foo.ts")

    def test_tests_included_by_default(self):
        assert _filter().should_include("tests/test_app.py")

    def test_interfaces_excluded(self):
        exclusion = _filter(include_interfaces=False)
        assert not exclusion.should_include("src/IRepository.cs")
        assert not exclusion.should_include("src/app/user.interface.ts")
        assert exclusion.should_include("src/Index.cs")

    def test_generated_excluded(self):
        exclusion = _filter(include_generated=False)
        assert not exclusion.should_include("src/Form1.Designer.cs")
        assert not exclusion.should_include("obj2/Model.g.cs")
        assert not exclusion.should_include("src/Api.generated.cs")
        assert exclusion.should_include("src/Model.cs")

    def test_migrations_folder(self):
        exclusion = _filter(include_migrations=False, migrations_folder="Migrations")
        assert not exclusion.should_include("Data/Migrations/20240101_Init.cs")
        assert exclusion.should_include("data/migrations/20240101_Init.cs")
        assert exclusion.is_excluded_folder("Migrations")

    def test_custom_migrations_folder(self):
        exclusion = _filter(include_migrations=False, migrations_folder="DbUpdates")
        assert not exclusion.should_include("DbUpdates/001.cs")
        assert exclusion.should_include("Migrations/001.cs")

    def test_rules_exposed(self):
        exclusion = _filter(include_generated=False)
        kinds = {rule.kind for rule in exclusion.rules}
        assert kinds == {RuleKind.FOLDER, RuleKind.PATTERN}
        assert "bin" in exclusion.excluded_folders


class TestExclusionRule:
    def test_folder_rule_never_matches_names(self):
        assert not ExclusionRule.folder("bin").matches_name("bin")

    def test_pattern_rule(self):
        rule = ExclusionRule.pattern("*.spec.ts")
        assert rule.matches_name("a.spec.ts")
        assert not rule.matches_name("a.ts")


class TestGitignoreStage:
    def test_gitignore_patterns_applied(self, tmp_path):
        (tmp_path / ".gitignore").write_text("*.generated.ts\nbuild/\n", encoding="utf-8")
        exclusion = ExclusionFilter(FilterConfig(respect_gitignore=True), root=tmp_path)

        assert not exclusion.should_include(tmp_path / "src" / "api.generated.ts")
        assert not exclusion.should_include(tmp_path / "build" / "out.ts")
        assert exclusion.should_include(tmp_path / "src" / "api.ts")

    def test_gitignore_off_by_default(self, tmp_path):
        (tmp_path / ".gitignore").write_text("*.ts\n", encoding="utf-8")
        exclusion = ExclusionFilter(FilterConfig(), root=tmp_path)
        assert exclusion.should_include(tmp_path / "a.ts")

    def test_gitignore_without_root_is_skipped(self):
        exclusion = ExclusionFilter(FilterConfig(respect_gitignore=True))
        assert exclusion.should_include("src/a.ts")
