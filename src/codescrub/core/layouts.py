"""
Destination path strategies, one per OutputLayout.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from codescrub.core.models import OutputLayout
from codescrub.core.projects import ProjectMapping


class PathStrategy(ABC):
    """
    Computes where a converted file is written.

    Strategies are pure: they never touch the filesystem.
    """

    layout: OutputLayout

    def __init__(self, extension: str = ".txt"):
        self.extension = extension

    @abstractmethod
    def destination_path(
        self,
        source_file: Path,
        source_root: Path,
        dest_root: Path,
        project_mapping: ProjectMapping,
    ) -> Path:
        """Destination of ``source_file`` under ``dest_root``."""
        pass

    def output_name(self, source_file: Path) -> str:
        """File name with its extension replaced by the output extension."""
        return source_file.with_suffix(self.extension).name


class SuperFlatPathStrategy(PathStrategy):
    """``dest/{project}.{name}.txt``; same-named files of one project overwrite."""

    layout = OutputLayout.SUPER_FLAT

    def destination_path(self, source_file, source_root, dest_root, project_mapping):
        project = project_mapping.name_for(source_file)
        return dest_root / f"{project}.{self.output_name(source_file)}"


class FlatPathStrategy(PathStrategy):
    """``dest/{project}/{name}.txt``; same-named files of one project overwrite."""

    layout = OutputLayout.FLAT

    def destination_path(self, source_file, source_root, dest_root, project_mapping):
        project = project_mapping.name_for(source_file)
        return dest_root / project / self.output_name(source_file)


class StructuredPathStrategy(PathStrategy):
    """Mirrors the source tree: ``dest/{relative path}.txt``."""

    layout = OutputLayout.STRUCTURED

    def destination_path(self, source_file, source_root, dest_root, project_mapping):
        relative = source_file.relative_to(source_root)
        return dest_root / relative.with_suffix(self.extension)


_STRATEGIES: dict[OutputLayout, type[PathStrategy]] = {
    OutputLayout.SUPER_FLAT: SuperFlatPathStrategy,
    OutputLayout.FLAT: FlatPathStrategy,
    OutputLayout.STRUCTURED: StructuredPathStrategy,
}


def get_path_strategy(layout: OutputLayout | str, extension: str = ".txt") -> PathStrategy:
    """Create the strategy for a layout."""
    return _STRATEGIES[OutputLayout.parse(layout)](extension)
