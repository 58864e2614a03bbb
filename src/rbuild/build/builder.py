"""Crate action builder.

Synthesizes the rustc (and optionally clippy) actions for one crate.

Entry variants:
    transform_src_to_binary      bin          -C lto
    transform_src_to_rlib        rlib
    transform_src_to_dylib       dylib
    transform_src_to_static      staticlib    -C lto
    transform_src_to_shared      cdylib       -C lto
    transform_src_to_proc_macro  proc-macro

Each variant differs only in the crate kind and whether LTO is requested;
all of them funnel into transform_src_to_crate(). build_crate() dispatches
on the request's crate kind.

Nothing here registers actions anywhere: the actions are returned and the
caller hands them to the build graph.
"""

import logging
from typing import Callable, Dict, List

from .build_context import BuildContext
from .coverage import derive_coverage_paths, profile_emit_flag
from .deps import link_dependencies
from .errors import InvalidCrateKindError
from .flags import LTO_FLAG, assemble_link_flags, assemble_rust_flags, join_flags, lto_enabled
from .models import (
    BuildAction,
    BuildOutput,
    CompilationRequest,
    CrateBuildResult,
    CrateKind,
    DependencySet,
    FlagConfiguration,
)
from .rules import CLIPPY_RULE, RUSTC_RULE

logger = logging.getLogger(__name__)

CLIPPY_SUFFIX = ".clippy"


def lint_marker_path(output_path: str) -> str:
    """Path of the clippy marker output for a compile output."""
    return output_path + CLIPPY_SUFFIX


def transform_src_to_crate(
    context: BuildContext,
    request: CompilationRequest,
    deps: DependencySet,
    flags: FlagConfiguration,
    crate_kind: CrateKind,
) -> CrateBuildResult:
    """Synthesize the actions that compile one crate.

    Args:
        context: Process-wide build context (rules, toolchain)
        request: Compilation unit
        deps: Resolved dependencies
        flags: Flag configuration, with LTO already appended when requested
        crate_kind: Crate kind passed to --crate-type

    Returns:
        CrateBuildResult with the clippy action (if linting) and the rustc action

    Raises:
        InvalidCrateKindError: If crate_kind differs from request.crate_kind
    """
    if request.crate_kind is not crate_kind:
        raise InvalidCrateKindError(
            f"{request.main_source}: request is for a {request.crate_kind} crate, not {crate_kind}"
        )

    main = request.main_source
    inputs = (main,)

    rust_flags = assemble_rust_flags(flags, request, crate_kind)
    link_flags = assemble_link_flags(flags, request)

    linked = link_dependencies(deps, request.link_dirs)
    lib_flags = list(linked.lib_flags)
    implicits: List[str] = list(linked.implicits)
    implicit_outputs: List[str] = []

    coverage_file = None
    if flags.coverage:
        artifact = derive_coverage_paths(request.output_path)
        rust_flags.append(profile_emit_flag(context.profile_emit_prefix, artifact.data_path))
        implicit_outputs.append(artifact.notes_path)
        coverage_file = artifact.notes_path

    actions: List[BuildAction] = []
    if flags.clippy:
        clippy_file = lint_marker_path(request.output_path)
        actions.append(
            BuildAction(
                rule=CLIPPY_RULE,
                description=f"clippy {main}",
                output=clippy_file,
                inputs=inputs,
                implicits=tuple(implicits),
                args={
                    "rustcFlags": join_flags(rust_flags),
                    "libFlags": join_flags(lib_flags),
                    "clippyFlags": join_flags(list(flags.clippy_flags)),
                },
            )
        )
        # The compile waits on clippy but does not consume its output
        implicits.append(clippy_file)

    crt = deps.crt
    actions.append(
        BuildAction(
            rule=RUSTC_RULE,
            description=f"rustc {main}",
            output=request.output_path,
            inputs=inputs,
            implicits=tuple(implicits),
            implicit_outputs=tuple(implicit_outputs),
            args={
                "rustcFlags": join_flags(rust_flags),
                "linkFlags": join_flags(link_flags),
                "libFlags": join_flags(lib_flags),
                "crtBegin": crt.begin if crt is not None else "",
                "crtEnd": crt.end if crt is not None else "",
            },
        )
    )

    for action in actions:
        context.rules.validate(action)
        logger.debug(f"{action.description} -> {action.output} ({len(action.implicits)} implicits)")

    return CrateBuildResult(
        actions=tuple(actions),
        output=BuildOutput(output_file=request.output_path, coverage_file=coverage_file),
    )


def _transform_variant(
    context: BuildContext,
    request: CompilationRequest,
    deps: DependencySet,
    flags: FlagConfiguration,
    crate_kind: CrateKind,
) -> CrateBuildResult:
    if lto_enabled(crate_kind):
        flags = flags.with_rust_flags(LTO_FLAG)
    return transform_src_to_crate(context, request, deps, flags, crate_kind)


def transform_src_to_binary(
    context: BuildContext, request: CompilationRequest, deps: DependencySet, flags: FlagConfiguration
) -> CrateBuildResult:
    return _transform_variant(context, request, deps, flags, CrateKind.BINARY)


def transform_src_to_rlib(
    context: BuildContext, request: CompilationRequest, deps: DependencySet, flags: FlagConfiguration
) -> CrateBuildResult:
    return _transform_variant(context, request, deps, flags, CrateKind.RLIB)


def transform_src_to_dylib(
    context: BuildContext, request: CompilationRequest, deps: DependencySet, flags: FlagConfiguration
) -> CrateBuildResult:
    return _transform_variant(context, request, deps, flags, CrateKind.DYLIB)


def transform_src_to_static(
    context: BuildContext, request: CompilationRequest, deps: DependencySet, flags: FlagConfiguration
) -> CrateBuildResult:
    return _transform_variant(context, request, deps, flags, CrateKind.STATICLIB)


def transform_src_to_shared(
    context: BuildContext, request: CompilationRequest, deps: DependencySet, flags: FlagConfiguration
) -> CrateBuildResult:
    return _transform_variant(context, request, deps, flags, CrateKind.CDYLIB)


def transform_src_to_proc_macro(
    context: BuildContext, request: CompilationRequest, deps: DependencySet, flags: FlagConfiguration
) -> CrateBuildResult:
    return _transform_variant(context, request, deps, flags, CrateKind.PROC_MACRO)


EntryVariant = Callable[[BuildContext, CompilationRequest, DependencySet, FlagConfiguration], CrateBuildResult]

ENTRY_VARIANTS: Dict[CrateKind, EntryVariant] = {
    CrateKind.BINARY: transform_src_to_binary,
    CrateKind.RLIB: transform_src_to_rlib,
    CrateKind.DYLIB: transform_src_to_dylib,
    CrateKind.STATICLIB: transform_src_to_static,
    CrateKind.CDYLIB: transform_src_to_shared,
    CrateKind.PROC_MACRO: transform_src_to_proc_macro,
}


def build_crate(
    context: BuildContext, request: CompilationRequest, deps: DependencySet, flags: FlagConfiguration
) -> CrateBuildResult:
    """Build a crate through the entry variant for its crate kind.

    Raises:
        InvalidCrateKindError: If the request's crate kind has no entry variant
    """
    try:
        variant = ENTRY_VARIANTS[request.crate_kind]
    except KeyError:
        raise InvalidCrateKindError(f"No entry variant for crate kind {request.crate_kind!r}") from None
    return variant(context, request, deps, flags)
