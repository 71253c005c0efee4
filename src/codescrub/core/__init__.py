"""
Core Layer - configuration, scanners, exclusion filter, project resolution and output layouts.
"""

from codescrub.core.config import (
    ConverterConfig,
    FilterConfig,
    LoggingConfig,
    OutputConfig,
    ScrubConfig,
    load_config,
)
from codescrub.core.errors import (
    CodescrubError,
    ConfigError,
    IOFailure,
    SetupFailure,
    UnsupportedFileType,
)
from codescrub.core.filters import (
    BASE_EXCLUDED_FOLDERS,
    ExclusionFilter,
    ExclusionRule,
    compile_glob,
    glob_to_regex,
)
from codescrub.core.layouts import PathStrategy, get_path_strategy
from codescrub.core.models import OutputLayout, SourceUnit
from codescrub.core.projects import (
    UNKNOWN_PROJECT,
    ProjectMapping,
    build_project_mapping,
    find_project_descriptors,
    is_project_root,
    resolve_project_mapping,
)
from codescrub.core.scanners import (
    LanguageScanner,
    ScannerRegistry,
    SourceKind,
    get_default_registry,
    scrub,
)

__all__ = [
    # Config
    "ConverterConfig",
    "FilterConfig",
    "ScrubConfig",
    "OutputConfig",
    "LoggingConfig",
    "load_config",
    # Errors
    "CodescrubError",
    "UnsupportedFileType",
    "IOFailure",
    "SetupFailure",
    "ConfigError",
    # Models
    "OutputLayout",
    "SourceUnit",
    # Scanners
    "LanguageScanner",
    "SourceKind",
    "ScannerRegistry",
    "get_default_registry",
    "scrub",
    # Filter
    "BASE_EXCLUDED_FOLDERS",
    "ExclusionFilter",
    "ExclusionRule",
    "glob_to_regex",
    "compile_glob",
    # Projects
    "UNKNOWN_PROJECT",
    "ProjectMapping",
    "build_project_mapping",
    "find_project_descriptors",
    "is_project_root",
    "resolve_project_mapping",
    # Layouts
    "PathStrategy",
    "get_path_strategy",
]
