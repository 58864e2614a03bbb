"""Compiler and linker flag assembly.

This module merges global and per-unit flags into the final rustc and linker
flag lists for one crate.

Design:
    Flag order is preserved exactly: global flags first, then per-unit flags,
    then the flags derived from the request (crate type, crate name, target).
    The sysroot is always pinned to /dev/null so rustc never picks up an
    implicit system toolchain.

    Whether a crate kind gets "-C lto" is decided here (lto_enabled) but
    applied by the entry variants in builder.py, which append it to the
    per-unit flags before assembly.
"""

from typing import List

from .errors import InvalidCrateKindError
from .models import CompilationRequest, CrateKind, FlagConfiguration

LTO_FLAG = "-C lto"
SYSROOT_FLAG = "--sysroot=/dev/null"


def lto_enabled(crate_kind: CrateKind) -> bool:
    """Return whether a crate kind is built with link-time optimization.

    Only kinds whose output is a final linked artifact get LTO.

    Args:
        crate_kind: Crate kind to check

    Returns:
        True for binary, staticlib and cdylib; False for rlib, dylib and proc-macro

    Raises:
        InvalidCrateKindError: If crate_kind is not a CrateKind
    """
    if crate_kind is CrateKind.BINARY:
        return True
    if crate_kind is CrateKind.STATICLIB:
        return True
    if crate_kind is CrateKind.CDYLIB:
        return True
    if crate_kind is CrateKind.RLIB:
        return False
    if crate_kind is CrateKind.DYLIB:
        return False
    if crate_kind is CrateKind.PROC_MACRO:
        return False
    raise InvalidCrateKindError(f"Invalid crate kind: {crate_kind!r}")


def assemble_rust_flags(
    flags: FlagConfiguration, request: CompilationRequest, crate_kind: CrateKind
) -> List[str]:
    """Build the rustc flag list for a crate.

    Args:
        flags: Flag configuration (LTO already appended when requested)
        request: Compilation request supplying crate name and target triple
        crate_kind: Crate kind passed to --crate-type

    Returns:
        Ordered rustc flags
    """
    if not isinstance(crate_kind, CrateKind):
        raise InvalidCrateKindError(f"Invalid crate kind: {crate_kind!r}")

    rust_flags = list(flags.global_rust_flags) + list(flags.rust_flags)
    rust_flags.append(f"--crate-type={crate_kind.value}")
    if request.crate_name:
        rust_flags.append(f"--crate-name={request.crate_name}")
    if request.target_triple:
        rust_flags.append(f"--target={request.target_triple}")

    # Suppress an implicit sysroot
    rust_flags.append(SYSROOT_FLAG)
    return rust_flags


def assemble_link_flags(flags: FlagConfiguration, request: CompilationRequest) -> List[str]:
    """Build the linker flag list for a crate.

    Args:
        flags: Flag configuration
        request: Compilation request supplying the target triple

    Returns:
        Ordered linker flags
    """
    link_flags = list(flags.global_link_flags) + list(flags.link_flags)
    if request.target_triple:
        link_flags.append(f"-target {request.target_triple}")
    return link_flags


def join_flags(flags: List[str]) -> str:
    """Join flags into the single string passed to a rule argument slot."""
    return " ".join(flags)
