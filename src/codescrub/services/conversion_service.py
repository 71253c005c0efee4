"""
Conversion Service for codescrub.

Coordinates the conversion workflow: discovery, exclusion, scanner
selection, scrubbing, destination layout and writing. Files are processed
one at a time; a failure on one file is recorded and the run moves on.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from codescrub.core.config import ConverterConfig
from codescrub.core.errors import IOFailure, SetupFailure
from codescrub.core.filters import ExclusionFilter
from codescrub.core.layouts import PathStrategy, get_path_strategy
from codescrub.core.models import SourceUnit
from codescrub.core.path_utils import ensure_directory_exists, validate_destination, validate_source_root
from codescrub.core.projects import ProjectMapping, build_project_mapping
from codescrub.core.scanners.registry import ScannerRegistry, get_default_registry
from codescrub.services.conversion_models import ConversionOutcome

logger = logging.getLogger(__name__)


class ConversionService:
    """
    Service for converting source trees into scrubbed text mirrors.
    """

    def __init__(
        self,
        registry: Optional[ScannerRegistry] = None,
        progress_callback: Optional[Callable[[int, int, str], None]] = None,
    ):
        """
        Initialize the conversion service.

        Args:
            registry: Capability registry used for discovery and scanner
                selection (default: the bundled registry)
            progress_callback: Optional callback(current, total, message)
        """
        self._registry = registry or get_default_registry()
        self._progress_callback = progress_callback

    def _report_progress(self, current: int, total: int, message: str) -> None:
        """Report progress if callback is set."""
        if self._progress_callback:
            self._progress_callback(current, total, message)
        logger.debug(f"Progress: {current}/{total} - {message}")

    def convert(self, source_root: Path | str, config: ConverterConfig) -> ConversionOutcome:
        """
        Convert every eligible file under ``source_root``.

        Args:
            source_root: Directory to convert
            config: Filters, scrub switches and output settings for the run

        Returns:
            ConversionOutcome with counters and per-file error messages

        Raises:
            SetupFailure: If the source root is unusable or the destination
                cannot be created; nothing has been written in that case
        """
        source_root = Path(source_root)
        dest_root = self._prepare(source_root, config)
        source_root = source_root.resolve()

        mapping = build_project_mapping(source_root)
        exclusion = ExclusionFilter(config.filters, root=source_root)
        strategy = get_path_strategy(config.output.layout, config.output.extension)

        logger.info(
            f"Converting {source_root} -> {dest_root} "
            f"({strategy.layout.value} layout, {len(mapping)} project(s))"
        )

        candidates = self._discover(source_root, dest_root, exclusion)
        outcome = ConversionOutcome(total=len(candidates))
        if not candidates:
            logger.info(f"No convertible files found under {source_root}")
            return outcome

        for i, source_file in enumerate(candidates, start=1):
            try:
                destination = self._convert_file(
                    source_file, source_root, dest_root, config, strategy, mapping
                )
                outcome.record_success(destination)
                self._report_progress(i, outcome.total, f"Converted {source_file} -> {destination}")
            except Exception as e:
                logger.warning(f"Failed to convert {source_file}: {e}")
                outcome.record_failure(f"Error processing {source_file}: {e}")
                self._report_progress(i, outcome.total, f"Failed {source_file}")

        logger.info(
            f"Conversion completed: {outcome.succeeded}/{outcome.total} succeeded, "
            f"{outcome.failed} failed"
        )
        return outcome

    def _prepare(self, source_root: Path, config: ConverterConfig) -> Path:
        """Validate the source and create the destination root."""
        validation = validate_source_root(source_root)
        if not validation.valid:
            raise SetupFailure(validation.error_message)

        dest_validation = validate_destination(config.output.destination, source_root)
        if not dest_validation.valid:
            raise SetupFailure(dest_validation.error_message)

        dest_root = Path(config.output.destination)
        if not ensure_directory_exists(dest_root):
            raise SetupFailure(f"Cannot create destination directory '{dest_root}'")
        return dest_root

    def _discover(
        self, source_root: Path, dest_root: Path, exclusion: ExclusionFilter
    ) -> list[Path]:
        """
        Walk the tree in sorted order and collect candidate files.

        Excluded folders and a destination nested inside the source are
        pruned. Candidates match a registered capability and pass the filter.
        """
        dest_resolved = dest_root.resolve()
        candidates: list[Path] = []
        for dirpath, dirnames, filenames in source_root.walk():
            dirnames[:] = sorted(
                d for d in dirnames
                if not exclusion.is_excluded_folder(d) and (dirpath / d).resolve() != dest_resolved
            )
            for filename in sorted(filenames):
                path = dirpath / filename
                if not self._registry.handles(path):
                    continue
                if exclusion.should_include(path):
                    candidates.append(path)
        logger.debug(f"Discovered {len(candidates)} candidate file(s) under {source_root}")
        return candidates

    def _convert_file(
        self,
        source_file: Path,
        source_root: Path,
        dest_root: Path,
        config: ConverterConfig,
        strategy: PathStrategy,
        mapping: ProjectMapping,
    ) -> Path:
        """Scrub one file and write it; returns the destination path."""
        scanner = self._registry.select(source_file)
        unit = SourceUnit.read(source_file)
        content = scanner.scrub(unit.content, config.scrub)

        destination = strategy.destination_path(source_file, source_root, dest_root, mapping)
        logger.debug(f"Writing {source_file} -> {destination}")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(content, encoding="utf-8")
        except OSError as e:
            raise IOFailure(destination, f"Failed to write output ({e.strerror or e})") from e
        return destination


def convert(source_root: Path | str, config: ConverterConfig) -> ConversionOutcome:
    """Convert ``source_root`` with a default ConversionService."""
    return ConversionService().convert(source_root, config)
