"""Exceptions raised while synthesizing build actions.

All of these are programmer errors: the inputs handed to the builder were
malformed. Failures of the compile/lint/zip commands themselves belong to
the build-graph engine that executes the actions.
"""


class RustBuildError(Exception):
    """Base class for rbuild errors."""
    pass


class InvalidCrateKindError(RustBuildError, ValueError):
    """Raised when a crate kind is outside the closed set of six kinds."""
    pass


class CrtPairError(RustBuildError, ValueError):
    """Raised when only one of the crtbegin/crtend objects is supplied."""
    pass


class UnknownRuleError(RustBuildError):
    """Raised when an action names a rule the registry does not declare."""
    pass


class UnknownRuleArgumentError(RustBuildError):
    """Raised when an action passes an argument slot its rule does not declare."""
    pass


class ToolchainConfigError(RustBuildError):
    """Raised when a toolchain configuration is missing or malformed."""
    pass
