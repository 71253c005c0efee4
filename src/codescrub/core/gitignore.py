"""
Gitignore rules for the optional third stage of the exclusion filter.

Supports:
- Nested .gitignore files, each scoped to its own directory
- Pattern precedence (later and deeper patterns override earlier ones)
- Negation patterns (!)
- Directory-only patterns (trailing /)
- Anchored patterns (leading /) and double-star globs (**), via pathspec
"""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GitignoreEntry:
    """
    One pattern line from a .gitignore file.

    Attributes:
        raw: Pattern as written (e.g. "!/important.cs")
        negation: True if the pattern re-includes files
        scope: Directory of the .gitignore, relative to the root ("" = root)
        spec: Compiled single-pattern matcher
    """

    raw: str
    negation: bool
    scope: str
    spec: pathspec.PathSpec

    @classmethod
    def parse(cls, raw_line: str, scope: str, case_sensitive: bool = True) -> "GitignoreEntry":
        negation = raw_line.startswith("!")
        # Matched positively; ``negation`` flips the outcome
        pattern = raw_line[1:] if negation else raw_line
        if not case_sensitive:
            pattern = pattern.lower()
        return cls(
            raw=raw_line,
            negation=negation,
            scope=scope,
            spec=pathspec.PathSpec.from_lines("gitwildmatch", [pattern]),
        )


class GitignoreRules:
    """
    Ordered gitignore patterns gathered below a root directory.

    A pattern from ``sub/.gitignore`` only applies to paths under ``sub/``
    and is matched against the path relative to ``sub``. The last matching
    pattern decides, so negations can re-include files.
    """

    def __init__(self, root_path: Path, case_sensitive: bool | None = None):
        """
        Initialize the rules.

        Args:
            root_path: Root directory for pattern matching
            case_sensitive: Override case sensitivity (None = auto-detect from platform)
        """
        self._root_path = Path(root_path).resolve()

        # Windows is case-insensitive, POSIX is case-sensitive
        if case_sensitive is None:
            self._case_sensitive = sys.platform != "win32"
        else:
            self._case_sensitive = case_sensitive

        self._entries: list[GitignoreEntry] = []

    @property
    def pattern_count(self) -> int:
        return len(self._entries)

    def load_gitignore(self, gitignore_path: Path) -> int:
        """
        Load patterns from a .gitignore file.

        Unreadable files are logged and skipped.

        Returns:
            Number of patterns loaded
        """
        gitignore_path = Path(gitignore_path).resolve()
        if not gitignore_path.exists():
            logger.debug(f"Gitignore file not found: {gitignore_path}")
            return 0

        try:
            scope = gitignore_path.parent.relative_to(self._root_path).as_posix()
        except ValueError:
            logger.debug(f"Gitignore outside root ignored: {gitignore_path}")
            return 0
        if scope == ".":
            scope = ""
        if not self._case_sensitive:
            scope = scope.lower()

        try:
            content = gitignore_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.warning(f"Invalid UTF-8 encoding in {gitignore_path}: {e}")
            return 0
        except OSError as e:
            logger.warning(f"Error reading {gitignore_path}: {e}")
            return 0

        loaded = 0
        for line in content.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                self._entries.append(GitignoreEntry.parse(line, scope, self._case_sensitive))
                loaded += 1
            except ValueError as e:
                logger.warning(f"Malformed pattern '{line}' in {gitignore_path}: {e}")

        if loaded:
            logger.debug(f"Loaded {loaded} patterns from {gitignore_path}")
        return loaded

    def load_gitignore_hierarchy(self, skip_folders: frozenset[str] = frozenset()) -> int:
        """
        Load every .gitignore from the root down.

        Files are loaded root first, then by depth, so deeper patterns take
        precedence. Directories named in ``skip_folders`` are not descended.

        Returns:
            Total number of patterns loaded
        """
        found: list[tuple[int, Path]] = []
        try:
            for dirpath, dirnames, filenames in self._root_path.walk():
                if ".gitignore" in filenames:
                    depth = len(dirpath.relative_to(self._root_path).parts)
                    found.append((depth, dirpath / ".gitignore"))
                dirnames[:] = sorted(d for d in dirnames if d not in skip_folders)
        except OSError as e:
            logger.warning(f"Error scanning directory: {e}")

        found.sort(key=lambda item: (item[0], str(item[1])))
        total = sum(self.load_gitignore(path) for _, path in found)
        logger.debug(f"Total patterns loaded from hierarchy: {total}")
        return total

    def matches(self, path: Path, is_dir: bool = False) -> bool:
        """
        Check if a path is ignored.

        Args:
            path: Path to check (absolute, or relative to the root)
            is_dir: True if the path is a directory

        Returns:
            True if the path should be ignored
        """
        path = Path(path)
        if path.is_absolute():
            try:
                path = path.resolve().relative_to(self._root_path)
            except ValueError:
                return False

        rel = str(path).replace("\\", "/")
        if not self._case_sensitive:
            rel = rel.lower()

        ignored = False
        for entry in self._entries:
            if entry.scope:
                if not rel.startswith(entry.scope + "/"):
                    continue
                scoped = rel[len(entry.scope) + 1:]
            else:
                scoped = rel
            candidate = scoped + "/" if is_dir else scoped
            if entry.spec.match_file(candidate):
                ignored = not entry.negation
        return ignored
