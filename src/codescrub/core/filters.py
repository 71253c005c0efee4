"""
Exclusion filter deciding which discovered files take part in a conversion.

Rules are fixed when the filter is built: folder names matched against
directory segments, and filename globs translated to anchored regular
expressions. Optionally, ``.gitignore`` files under the source root are
honoured as a third stage.
"""

import logging
import re
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath

from codescrub.core.config import FilterConfig
from codescrub.core.gitignore import GitignoreRules

logger = logging.getLogger(__name__)

# Build output, IDE state, package caches and VCS metadata
BASE_EXCLUDED_FOLDERS: tuple[str, ...] = (
    "bin",
    "obj",
    ".vs",
    "packages",
    "node_modules",
    "dist",
    ".angular",
    ".git",
    ".svn",
    "__pycache__",
    ".venv",
)

TEST_FOLDERS: tuple[str, ...] = ("Test", "Tests", "test", "tests", "__tests__")

INTERFACE_PATTERNS: tuple[str, ...] = ("I[A-Z]*.cs", "*.interface.ts")

TEST_PATTERNS: tuple[str, ...] = (
    "*Test*.cs",
    "*Tests*.cs",
    "*.spec.ts",
    "*.test.ts",
    "test_*.py",
    "*_test.py",
)

GENERATED_PATTERNS: tuple[str, ...] = ("*.g.cs", "*.g.i.cs", "*.generated.cs", "*.Designer.cs")


def glob_to_regex(pattern: str) -> str:
    """
    Translate a filename glob into an anchored regular expression.

    ``*`` matches any run of characters, ``?`` one character, and
    ``[...]`` a character class (``[!...]`` negated). Everything else is
    literal. There is no ``**``: a filename has no separators to cross.
    """
    out = ["^"]
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        i += 1
        if ch == "*":
            out.append(".*")
        elif ch == "?":
            out.append(".")
        elif ch == "[":
            end = i
            if end < n and pattern[end] == "!":
                end += 1
            if end < n and pattern[end] == "]":
                end += 1
            end = pattern.find("]", end)
            if end == -1:
                out.append(re.escape(ch))
                continue
            body = pattern[i:end]
            i = end + 1
            if body.startswith("!"):
                body = "^" + body[1:]
            elif body.startswith("^"):
                body = "\\" + body
            out.append(f"[{body.replace(chr(92), chr(92) * 2)}]")
        else:
            out.append(re.escape(ch))
    out.append("$")
    return "".join(out)


def compile_glob(pattern: str, case_sensitive: bool = True) -> re.Pattern[str]:
    """Compile a filename glob into a regex matcher."""
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(glob_to_regex(pattern), flags)


class RuleKind(str, Enum):
    FOLDER = "folder"
    PATTERN = "pattern"


@dataclass(frozen=True)
class ExclusionRule:
    """
    A single exclusion rule.

    Attributes:
        kind: Folder rules match a whole directory segment; pattern rules
            match the filename
        value: Folder name or glob
        matcher: Compiled glob for pattern rules
    """

    kind: RuleKind
    value: str
    matcher: re.Pattern[str] | None = None

    @classmethod
    def folder(cls, name: str) -> "ExclusionRule":
        return cls(RuleKind.FOLDER, name)

    @classmethod
    def pattern(cls, glob: str, case_sensitive: bool = True) -> "ExclusionRule":
        return cls(RuleKind.PATTERN, glob, compile_glob(glob, case_sensitive))

    def matches_name(self, filename: str) -> bool:
        return self.matcher is not None and self.matcher.fullmatch(filename) is not None


class ExclusionFilter:
    """
    Decides whether a file participates in a conversion.

    Evaluation order: folder rules against the directory segments of the
    path, then filename patterns, then gitignore rules when enabled.
    Folder names always compare case-sensitively; filename patterns follow
    the platform unless ``case_sensitive`` is given.
    """

    def __init__(
        self,
        config: FilterConfig | None = None,
        root: Path | None = None,
        case_sensitive: bool | None = None,
    ):
        """
        Initialize the filter.

        Args:
            config: Filter switches; defaults to FilterConfig()
            root: Source root. Folder rules then only look at segments below
                it, and gitignore rules become available.
            case_sensitive: Override pattern case sensitivity (None = platform)
        """
        self._config = config or FilterConfig()
        self._root = Path(root).resolve() if root is not None else None
        if case_sensitive is None:
            case_sensitive = sys.platform != "win32"
        self._case_sensitive = case_sensitive

        folders = list(BASE_EXCLUDED_FOLDERS)
        patterns: list[str] = []
        if not self._config.include_migrations and self._config.migrations_folder:
            folders.append(self._config.migrations_folder)
        if not self._config.include_tests:
            folders.extend(TEST_FOLDERS)
            patterns.extend(TEST_PATTERNS)
        if not self._config.include_interfaces:
            patterns.extend(INTERFACE_PATTERNS)
        if not self._config.include_generated:
            patterns.extend(GENERATED_PATTERNS)

        self._rules: tuple[ExclusionRule, ...] = tuple(
            [ExclusionRule.folder(name) for name in dict.fromkeys(folders)]
            + [ExclusionRule.pattern(glob, case_sensitive) for glob in patterns]
        )
        self._folders = frozenset(r.value for r in self._rules if r.kind is RuleKind.FOLDER)

        self._gitignore: GitignoreRules | None = None
        if self._config.respect_gitignore:
            if self._root is None:
                logger.warning("respect_gitignore is set but the filter has no root; ignoring it")
            else:
                self._gitignore = GitignoreRules(self._root, case_sensitive=case_sensitive)
                self._gitignore.load_gitignore_hierarchy(skip_folders=self._folders)

    @property
    def rules(self) -> tuple[ExclusionRule, ...]:
        return self._rules

    @property
    def excluded_folders(self) -> frozenset[str]:
        return self._folders

    def is_excluded_folder(self, name: str) -> bool:
        """Check a single directory name against the folder rules."""
        return name in self._folders

    def should_include(self, path: Path | str) -> bool:
        """
        Decide whether ``path`` participates in the conversion.

        Args:
            path: File path, absolute or relative to the root

        Returns:
            False if any rule excludes the file
        """
        path = Path(path)
        relative = self._relative(path)
        normalized = PurePath(str(relative).replace("\\", "/"))
        segments = normalized.parts[:-1]

        for segment in segments:
            if segment in self._folders:
                logger.debug(f"Excluded {path}: folder '{segment}'")
                return False

        for rule in self._rules:
            if rule.kind is RuleKind.PATTERN and rule.matches_name(normalized.name):
                logger.debug(f"Excluded {path}: pattern '{rule.value}'")
                return False

        if self._gitignore is not None and self._gitignore.matches(relative):
            logger.debug(f"Excluded {path}: .gitignore")
            return False

        return True

    def _relative(self, path: Path) -> Path:
        """Path below the root; relative paths are taken from the working directory."""
        if self._root is None:
            return path
        try:
            return path.resolve().relative_to(self._root)
        except ValueError:
            return path
