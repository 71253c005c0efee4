"""
Project resolution: which logical project a source file belongs to.

Project descriptors (``*.csproj`` and friends, ``angular.json``,
``package.json``, ``pyproject.toml``) are discovered under the source root
and each is given a human-readable name. A file belongs to the descriptor
whose directory is its deepest ancestor.
"""

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path

from codescrub.core.filters import BASE_EXCLUDED_FOLDERS, compile_glob

logger = logging.getLogger(__name__)

UNKNOWN_PROJECT = "Unknown"

COMPILED_DESCRIPTOR_PATTERNS = tuple(compile_glob(p) for p in ("*.csproj", "*.vbproj", "*.fsproj"))
WORKSPACE_MANIFEST = "angular.json"
PACKAGE_MANIFEST = "package.json"
PYTHON_MANIFEST = "pyproject.toml"
SOLUTION_PATTERN = compile_glob("*.sln")

# Tie-break when several descriptors share a directory: lower wins
_DESCRIPTOR_RANK = {WORKSPACE_MANIFEST: 1, PACKAGE_MANIFEST: 2, PYTHON_MANIFEST: 3}

_DEFAULT_PROJECT_PATTERN = re.compile(r'"defaultProject"\s*:\s*"([^"]+)"')
_PROJECTS_FIRST_KEY_PATTERN = re.compile(r'"projects"\s*:\s*\{\s*"([^"]+)"')
_NAME_PATTERN = re.compile(r'"name"\s*:\s*"([^"]+)"')
_TOML_SECTION_PATTERN = re.compile(r"^\s*\[([^\]]+)\]\s*$", re.MULTILINE)
_TOML_NAME_PATTERN = re.compile(r"""^\s*name\s*=\s*["']([^"']+)["']""", re.MULTILINE)


def _is_compiled_descriptor(name: str) -> bool:
    return any(p.fullmatch(name) for p in COMPILED_DESCRIPTOR_PATTERNS)


def is_descriptor(path: Path) -> bool:
    """Check whether a file name is a recognised project descriptor."""
    return _is_compiled_descriptor(path.name) or path.name in _DESCRIPTOR_RANK


def _rank(descriptor: Path) -> int:
    if _is_compiled_descriptor(descriptor.name):
        return 0
    return _DESCRIPTOR_RANK.get(descriptor.name, len(_DESCRIPTOR_RANK) + 1)


def is_project_root(path: Path | str) -> bool:
    """
    Check whether a directory is a convertible project root.

    A root holds a solution file, a web workspace manifest, a package
    manifest or a ``pyproject.toml``.
    """
    path = Path(path)
    if not path.is_dir():
        return False
    try:
        for child in path.iterdir():
            if not child.is_file():
                continue
            if SOLUTION_PATTERN.fullmatch(child.name) or child.name in _DESCRIPTOR_RANK:
                return True
    except OSError as e:
        logger.warning(f"Cannot list {path}: {e}")
    return False


def find_project_descriptors(root: Path | str) -> list[Path]:
    """
    Find project descriptors below ``root``, skipping the base excluded folders.

    Returns:
        Descriptor paths in deterministic (sorted walk) order
    """
    root = Path(root)
    descriptors: list[Path] = []
    for dirpath, dirnames, filenames in root.walk():
        dirnames[:] = sorted(d for d in dirnames if d not in BASE_EXCLUDED_FOLDERS)
        for filename in sorted(filenames):
            candidate = dirpath / filename
            if is_descriptor(candidate):
                descriptors.append(candidate)
    return descriptors


def _read_compiled_name(descriptor: Path) -> str:
    """First non-empty AssemblyName under a PropertyGroup, else the file stem."""
    try:
        tree = ET.parse(descriptor)
    except (ET.ParseError, OSError) as e:
        logger.warning(f"Could not read project file {descriptor}: {e}")
        return descriptor.stem

    for element in tree.getroot().iter():
        if _local_name(element.tag) != "PropertyGroup":
            continue
        for child in element:
            if _local_name(child.tag) == "AssemblyName" and child.text and child.text.strip():
                return child.text.strip()
    return descriptor.stem


def _local_name(tag: object) -> str:
    # "{http://schemas.microsoft.com/developer/msbuild/2003}AssemblyName" -> "AssemblyName"
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _normalize_package_name(name: str) -> str:
    """``@org/pkg`` becomes ``org.pkg``."""
    name = name.strip()
    if name.startswith("@"):
        name = name[1:].replace("/", ".", 1)
    return name


def _read_web_name(descriptor: Path) -> str | None:
    content = descriptor.read_text(encoding="utf-8")
    if descriptor.name == WORKSPACE_MANIFEST:
        match = _DEFAULT_PROJECT_PATTERN.search(content) or _PROJECTS_FIRST_KEY_PATTERN.search(content)
        return match.group(1) if match else None
    match = _NAME_PATTERN.search(content)
    return _normalize_package_name(match.group(1)) if match else None


def _read_pyproject_name(descriptor: Path) -> str | None:
    content = descriptor.read_text(encoding="utf-8")
    sections = list(_TOML_SECTION_PATTERN.finditer(content))
    for i, section in enumerate(sections):
        if section.group(1).strip() not in ("project", "tool.poetry"):
            continue
        end = sections[i + 1].start() if i + 1 < len(sections) else len(content)
        match = _TOML_NAME_PATTERN.search(content, section.end(), end)
        if match:
            return match.group(1)
    return None


def read_project_name(descriptor: Path | str) -> str:
    """
    Read the human-readable project name from a descriptor.

    Never raises: unreadable or malformed descriptors fall back to the file
    stem (compiled projects), the containing directory name, or ``Unknown``.
    """
    descriptor = Path(descriptor)
    if _is_compiled_descriptor(descriptor.name):
        return _read_compiled_name(descriptor)

    try:
        if descriptor.name == PYTHON_MANIFEST:
            name = _read_pyproject_name(descriptor)
        else:
            name = _read_web_name(descriptor)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read project manifest {descriptor}: {e}")
        name = None

    if name:
        return name
    return descriptor.parent.name or UNKNOWN_PROJECT


@dataclass(frozen=True)
class ProjectMapping:
    """
    Descriptor path to project name, built once per run.

    Attributes:
        projects: Descriptor path -> project name, in discovery order
    """

    projects: dict[Path, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.projects)

    def owner_of(self, source_file: Path | str) -> Path | None:
        """
        Descriptor owning ``source_file``: the one whose directory is the
        longest path-component prefix of the file. Ties go to compiled
        descriptors, then angular.json, package.json, pyproject.toml, then
        path order.
        """
        source_file = Path(source_file)
        owners = [d for d in self.projects if source_file.is_relative_to(d.parent)]
        if not owners:
            return None
        return min(owners, key=lambda d: (-len(d.parent.parts), _rank(d), str(d)))

    def name_for(self, source_file: Path | str) -> str:
        owner = self.owner_of(source_file)
        return self.projects[owner] if owner is not None else UNKNOWN_PROJECT


def resolve_project_mapping(descriptors: list[Path]) -> ProjectMapping:
    """Build a ProjectMapping from descriptor files."""
    projects = {Path(d): read_project_name(d) for d in descriptors}
    for descriptor, name in projects.items():
        logger.debug(f"Project {name!r} from {descriptor}")
    return ProjectMapping(projects=projects)


def build_project_mapping(root: Path | str) -> ProjectMapping:
    """Discover descriptors below ``root`` and resolve their names."""
    return resolve_project_mapping(find_project_descriptors(root))
