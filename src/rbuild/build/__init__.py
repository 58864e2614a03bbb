"""
Build action synthesis for Rust crates.

This package provides:
- Flag assembly (rustc and linker flags, LTO policy)
- Dependency flags and implicit inputs
- Coverage path derivation and the coverage zip action
- The crate builder that ties them together
"""

from .build_context import BuildContext
from .builder import build_crate, transform_src_to_crate
from .coverage import derive_coverage_paths, transform_coverage_files_to_zip
from .errors import (
    CrtPairError,
    InvalidCrateKindError,
    RustBuildError,
    ToolchainConfigError,
    UnknownRuleArgumentError,
    UnknownRuleError,
)
from .models import (
    BuildAction,
    BuildOutput,
    CompilationRequest,
    CrateBuildResult,
    CrateKind,
    CrtObjects,
    DependencySet,
    FlagConfiguration,
    RustLibrary,
)

__all__ = [
    'BuildAction',
    'BuildContext',
    'BuildOutput',
    'CompilationRequest',
    'CrateBuildResult',
    'CrateKind',
    'CrtObjects',
    'CrtPairError',
    'DependencySet',
    'FlagConfiguration',
    'InvalidCrateKindError',
    'RustBuildError',
    'RustLibrary',
    'ToolchainConfigError',
    'UnknownRuleArgumentError',
    'UnknownRuleError',
    'build_crate',
    'derive_coverage_paths',
    'transform_coverage_files_to_zip',
    'transform_src_to_crate',
]
