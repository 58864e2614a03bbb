"""Data models for Rust build-action synthesis.

Defines the dataclasses handed into and returned from the crate builder:
- CrateKind: Closed enum of crate output shapes
- CompilationRequest: One compilation unit (source, name, kind, target, output)
- FlagConfiguration: Global and per-unit compiler/linker/clippy flags
- DependencySet: Resolved Rust and native dependencies of a unit
- BuildAction: A single declarative action for the build-graph engine
- CrateBuildResult: Actions plus the outputs a crate build declared

All models are frozen. They are built fresh per call and handed to the
caller, so concurrent builds never share mutable state.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from .errors import CrtPairError, InvalidCrateKindError


class CrateKind(Enum):
    """Crate output shape, as passed to --crate-type."""

    BINARY = "bin"
    RLIB = "rlib"
    DYLIB = "dylib"
    STATICLIB = "staticlib"
    CDYLIB = "cdylib"
    PROC_MACRO = "proc-macro"

    def __str__(self) -> str:
        """Return the --crate-type token."""
        return self.value

    @classmethod
    def parse(cls, value: Any) -> "CrateKind":
        """Parse a crate kind from its command-line token.

        Accepts "binary" as an alias for "bin".

        Args:
            value: A CrateKind or its string form

        Returns:
            The matching CrateKind

        Raises:
            InvalidCrateKindError: If value is not one of the six kinds
        """
        if isinstance(value, CrateKind):
            return value
        if isinstance(value, str):
            try:
                return cls(_CRATE_KIND_ALIASES.get(value, value))
            except ValueError:
                pass
        valid = ", ".join(kind.value for kind in cls)
        raise InvalidCrateKindError(f"Invalid crate kind {value!r} (expected one of: {valid})")


_CRATE_KIND_ALIASES = {"binary": CrateKind.BINARY.value}


def _require(data: dict[str, Any], key: str, what: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"Missing required field in {what}: {key!r}") from None


def _str_list(data: dict[str, Any], key: str, what: str) -> tuple[str, ...]:
    """Read an optional list-of-strings field.

    A bare string is rejected rather than split into characters.
    """
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"Field {key!r} in {what} must be a list of strings, got {value!r}")
    return tuple(value)


@dataclass(frozen=True)
class CompilationRequest:
    """A single compilation unit.

    Attributes:
        main_source: Crate root source file (e.g. "src/lib.rs")
        crate_name: Crate name; empty means no --crate-name flag
        crate_kind: Crate output shape
        output_path: Path of the artifact the compile action writes
        target_triple: Target triple; empty means host (no target flags)
        link_dirs: Extra library search directories, in order
    """

    main_source: str
    crate_name: str
    crate_kind: CrateKind
    output_path: str
    target_triple: str = ""
    link_dirs: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.crate_kind, CrateKind):
            raise InvalidCrateKindError(
                f"crate_kind must be a CrateKind, got {self.crate_kind!r}; use CrateKind.parse()"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CompilationRequest":
        """Parse a request from a JSON-style dictionary."""
        return cls(
            main_source=_require(data, "main_source", "compilation request"),
            crate_name=data.get("crate_name", ""),
            crate_kind=CrateKind.parse(_require(data, "crate_kind", "compilation request")),
            output_path=_require(data, "output_path", "compilation request"),
            target_triple=data.get("target_triple", ""),
            link_dirs=_str_list(data, "link_dirs", "compilation request"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "main_source": self.main_source,
            "crate_name": self.crate_name,
            "crate_kind": self.crate_kind.value,
            "output_path": self.output_path,
            "target_triple": self.target_triple,
            "link_dirs": list(self.link_dirs),
        }


@dataclass(frozen=True)
class FlagConfiguration:
    """Flags for one compilation unit.

    Order is preserved end to end; rustc and the linker are order-sensitive.

    Attributes:
        global_rust_flags: Compiler flags shared by every unit
        rust_flags: Compiler flags for this unit only
        global_link_flags: Linker flags shared by every unit
        link_flags: Linker flags for this unit only
        clippy_flags: Extra flags for the clippy lint action
        coverage: Instrument for gcov-style coverage
        clippy: Emit a clippy lint action ahead of the compile
    """

    global_rust_flags: tuple[str, ...] = ()
    rust_flags: tuple[str, ...] = ()
    global_link_flags: tuple[str, ...] = ()
    link_flags: tuple[str, ...] = ()
    clippy_flags: tuple[str, ...] = ()
    coverage: bool = False
    clippy: bool = False

    def with_rust_flags(self, *extra: str) -> "FlagConfiguration":
        """Return a copy with extra per-unit compiler flags appended."""
        return replace(self, rust_flags=self.rust_flags + tuple(extra))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FlagConfiguration":
        return cls(
            global_rust_flags=_str_list(data, "global_rust_flags", "flag configuration"),
            rust_flags=_str_list(data, "rust_flags", "flag configuration"),
            global_link_flags=_str_list(data, "global_link_flags", "flag configuration"),
            link_flags=_str_list(data, "link_flags", "flag configuration"),
            clippy_flags=_str_list(data, "clippy_flags", "flag configuration"),
            coverage=bool(data.get("coverage", False)),
            clippy=bool(data.get("clippy", False)),
        )


@dataclass(frozen=True)
class RustLibrary:
    """A resolved Rust crate dependency."""

    crate_name: str
    path: str


@dataclass(frozen=True)
class CrtObjects:
    """The crtbegin/crtend object pair wrapped around the link line."""

    begin: str
    end: str


@dataclass(frozen=True)
class DependencySet:
    """Resolved dependencies of a compilation unit.

    Attributes:
        rlibs: Rust static library dependencies
        dylibs: Rust dynamic library dependencies
        proc_macros: Procedural macro dependencies
        static_libs: Native static libraries (linked via link flags)
        shared_libs: Native shared libraries (linked via link flags)
        crt: Startup/teardown objects, or None
    """

    rlibs: tuple[RustLibrary, ...] = ()
    dylibs: tuple[RustLibrary, ...] = ()
    proc_macros: tuple[RustLibrary, ...] = ()
    static_libs: tuple[str, ...] = ()
    shared_libs: tuple[str, ...] = ()
    crt: CrtObjects | None = None

    @classmethod
    def create(
        cls,
        rlibs: tuple[RustLibrary, ...] = (),
        dylibs: tuple[RustLibrary, ...] = (),
        proc_macros: tuple[RustLibrary, ...] = (),
        static_libs: tuple[str, ...] = (),
        shared_libs: tuple[str, ...] = (),
        crt_begin: str | None = None,
        crt_end: str | None = None,
    ) -> "DependencySet":
        """Create a DependencySet from separately supplied CRT objects.

        Raises:
            CrtPairError: If exactly one of crt_begin/crt_end is given
        """
        if (crt_begin is None) != (crt_end is None):
            raise CrtPairError(
                f"crt_begin and crt_end must be given together (crt_begin={crt_begin!r}, crt_end={crt_end!r})"
            )
        crt = CrtObjects(crt_begin, crt_end) if crt_begin is not None and crt_end is not None else None
        return cls(
            rlibs=tuple(rlibs),
            dylibs=tuple(dylibs),
            proc_macros=tuple(proc_macros),
            static_libs=tuple(static_libs),
            shared_libs=tuple(shared_libs),
            crt=crt,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DependencySet":
        """Parse dependencies from a JSON-style dictionary.

        Rust libraries are given as {"crate_name": ..., "path": ...} objects.
        """

        def libs(key: str) -> tuple[RustLibrary, ...]:
            entries = data.get(key, [])
            if not isinstance(entries, list) or not all(isinstance(lib, dict) for lib in entries):
                raise ValueError(f"Field {key!r} in dependency set must be a list of objects, got {entries!r}")
            return tuple(
                RustLibrary(
                    crate_name=_require(lib, "crate_name", key),
                    path=_require(lib, "path", key),
                )
                for lib in entries
            )

        return cls.create(
            rlibs=libs("rlibs"),
            dylibs=libs("dylibs"),
            proc_macros=libs("proc_macros"),
            static_libs=_str_list(data, "static_libs", "dependency set"),
            shared_libs=_str_list(data, "shared_libs", "dependency set"),
            crt_begin=data.get("crt_begin"),
            crt_end=data.get("crt_end"),
        )


@dataclass(frozen=True)
class BuildAction:
    """A declarative action for the build-graph engine.

    Attributes:
        rule: Rule name ("rustc", "clippy" or "zip")
        description: Progress line shown by the engine
        output: Primary output path
        inputs: Positional inputs ($in)
        implicits: Inputs that affect staleness but are not passed positionally
        implicit_outputs: Extra declared outputs
        args: Values for the rule's named argument slots
    """

    rule: str
    description: str
    output: str
    inputs: tuple[str, ...] = ()
    implicits: tuple[str, ...] = ()
    implicit_outputs: tuple[str, ...] = ()
    args: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # Read-only copy
        object.__setattr__(self, "args", MappingProxyType(dict(self.args)))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "rule": self.rule,
            "description": self.description,
            "output": self.output,
            "implicit_outputs": list(self.implicit_outputs),
            "inputs": list(self.inputs),
            "implicits": list(self.implicits),
            "args": dict(self.args),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuildAction":
        """Deserialize from dictionary."""
        return cls(
            rule=data["rule"],
            description=data.get("description", ""),
            output=data["output"],
            inputs=_str_list(data, "inputs", "build action"),
            implicits=_str_list(data, "implicits", "build action"),
            implicit_outputs=_str_list(data, "implicit_outputs", "build action"),
            args=dict(data.get("args", {})),
        )


@dataclass(frozen=True)
class BuildOutput:
    """Outputs a crate build declared.

    coverage_file is the gcno notes file, kept so the caller can archive it
    later with transform_coverage_files_to_zip().
    """

    output_file: str
    coverage_file: str | None = None


@dataclass(frozen=True)
class CrateBuildResult:
    """Result of synthesizing one crate's actions.

    actions holds the clippy action first (when linting) and the rustc
    action last.
    """

    actions: tuple[BuildAction, ...]
    output: BuildOutput

    @property
    def compile_action(self) -> BuildAction:
        return self.actions[-1]

    @property
    def lint_action(self) -> BuildAction | None:
        return self.actions[0] if len(self.actions) > 1 else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "actions": [action.to_dict() for action in self.actions],
            "output_file": self.output.output_file,
            "coverage_file": self.output.coverage_file,
        }
