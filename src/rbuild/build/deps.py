"""Dependency flags and implicit inputs.

Turns a resolved DependencySet into the rustc library flags and the list of
paths the build graph must track so a changed dependency rebuilds the crate.
"""

from dataclasses import dataclass
from typing import Iterable, List

from .models import DependencySet, RustLibrary


@dataclass(frozen=True)
class LinkedDependencies:
    """Library flags and implicit inputs derived from a DependencySet.

    Attributes:
        lib_flags: --extern and -L flags, in order
        implicits: Dependency paths that affect staleness, in order
    """

    lib_flags: tuple[str, ...]
    implicits: tuple[str, ...]


def extern_flag(lib: RustLibrary) -> str:
    """Format the --extern flag for a Rust library."""
    return f"--extern {lib.crate_name}={lib.path}"


def rust_libs_to_paths(libs: Iterable[RustLibrary]) -> List[str]:
    return [lib.path for lib in libs]


def link_dependencies(deps: DependencySet, link_dirs: Iterable[str] = ()) -> LinkedDependencies:
    """Collect library flags and implicit inputs.

    Rust libraries are passed with --extern in rlib, dylib, proc-macro order.
    Search directories become -L flags but are never implicit inputs since
    they are not files. Native libraries and the CRT objects are implicit
    inputs only; they reach the linker through the link flags.

    Args:
        deps: Resolved dependencies
        link_dirs: Extra library search directories

    Returns:
        LinkedDependencies with flags and implicits in stable order
    """
    rust_libs = list(deps.rlibs) + list(deps.dylibs) + list(deps.proc_macros)

    lib_flags = [extern_flag(lib) for lib in rust_libs]
    lib_flags.extend(f"-L {path}" for path in link_dirs)

    implicits = rust_libs_to_paths(rust_libs)
    implicits.extend(deps.static_libs)
    implicits.extend(deps.shared_libs)
    if deps.crt is not None:
        implicits.extend([deps.crt.begin, deps.crt.end])

    return LinkedDependencies(lib_flags=tuple(lib_flags), implicits=tuple(implicits))
