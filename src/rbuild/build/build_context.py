"""Build Context - process-wide build configuration.

Design:
    BuildContext is created once at startup from a ToolchainConfig and then
    passed explicitly into every crate build. It holds the frozen rule
    templates and the toolchain values the builder needs, so builders keep no
    global state and can run concurrently.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .coverage import profile_emit_prefix
from .rules import RuleSet, create_rules

if TYPE_CHECKING:
    from ..toolchain_configs import ToolchainConfig


@dataclass(frozen=True)
class BuildContext:
    """Immutable configuration shared by all crate builds.

    Attributes:
        toolchain: Toolchain configuration the rules were built from
        rules: Rule templates for rustc, clippy and zip
    """

    toolchain: "ToolchainConfig"
    rules: RuleSet

    @classmethod
    def create(cls, toolchain: "ToolchainConfig") -> "BuildContext":
        """Create a BuildContext, building the rule templates once."""
        return cls(toolchain=toolchain, rules=create_rules(toolchain))

    @property
    def profile_emit_prefix(self) -> str:
        """Absolute prefix for gcda paths (e.g. "/proc/self/cwd")."""
        return profile_emit_prefix(self.toolchain.pwd_prefix)

    @property
    def coverage_out_dir(self) -> str:
        """Directory coverage zips are written to."""
        return self.toolchain.out_dir
