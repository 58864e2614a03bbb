"""Command templates for the rustc, clippy and zip rules.

Every BuildAction names one of these rules; the build-graph engine expands
the template with the action's inputs, outputs and argument slots.

Design:
    Templates are built once from the ToolchainConfig (create_rules) into a
    frozen RuleSet and carried by the BuildContext. Nothing mutates them
    afterwards, so concurrent builders read them without locking.

    Templates use ninja variable syntax: $in, $out and ${slot} for the
    action's args.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

from .errors import UnknownRuleArgumentError, UnknownRuleError
from .models import BuildAction

if TYPE_CHECKING:
    from ..toolchain_configs import ToolchainConfig

RUSTC_RULE = "rustc"
CLIPPY_RULE = "clippy"
ZIP_RULE = "zip"


@dataclass(frozen=True)
class RuleTemplate:
    """A fixed command template.

    Attributes:
        name: Rule name referenced by BuildAction.rule
        command: Command line with $in/$out and ${slot} references
        arg_names: Argument slots an action may set
        command_deps: Tools the command runs; changes to them rebuild every action
        depfile: Make-style dependency file written by the command, if any
        deps: Depfile format understood by the engine ("gcc") or ""
        rspfile: Response file path, if the command reads its inputs from one
        rspfile_content: Content written to the response file
    """

    name: str
    command: str
    arg_names: tuple[str, ...] = ()
    command_deps: tuple[str, ...] = ()
    depfile: str = ""
    deps: str = ""
    rspfile: str = ""
    rspfile_content: str = ""


@dataclass(frozen=True)
class RuleSet:
    """The immutable registry of rule templates."""

    rustc: RuleTemplate
    clippy: RuleTemplate
    zip: RuleTemplate

    def __iter__(self) -> Iterator[RuleTemplate]:
        return iter((self.rustc, self.clippy, self.zip))

    def get(self, name: str) -> RuleTemplate:
        """Look up a rule by name.

        Raises:
            UnknownRuleError: If no rule has that name
        """
        for rule in self:
            if rule.name == name:
                return rule
        raise UnknownRuleError(f"Unknown rule: {name!r}")

    def validate(self, action: BuildAction) -> RuleTemplate:
        """Check that an action's rule and argument slots are declared.

        Returns:
            The action's RuleTemplate

        Raises:
            UnknownRuleError: If the action's rule is unknown
            UnknownRuleArgumentError: If the action sets an undeclared slot
        """
        rule = self.get(action.rule)
        unknown = sorted(set(action.args) - set(rule.arg_names))
        if unknown:
            raise UnknownRuleArgumentError(
                f"Rule {rule.name!r} does not declare argument(s): {', '.join(unknown)}"
            )
        return rule


def create_rules(toolchain: "ToolchainConfig") -> RuleSet:
    """Build the rule templates for a toolchain.

    Args:
        toolchain: Toolchain paths substituted into the commands

    Returns:
        Frozen RuleSet
    """
    linker_args = " ".join(toolchain.rust_linker_args)

    rustc = RuleTemplate(
        name=RUSTC_RULE,
        command=(
            f"{toolchain.rustc_cmd} "
            f"-C linker={toolchain.rust_linker} "
            f'-C link-args="${{crtBegin}} {linker_args} ${{linkFlags}} ${{crtEnd}}" '
            "--emit link -o $out --emit dep-info=$out.d $in ${libFlags} $rustcFlags"
        ),
        arg_names=("rustcFlags", "linkFlags", "libFlags", "crtBegin", "crtEnd"),
        command_deps=(toolchain.rustc_cmd,),
        # rustc writes make-compatible dep-info files
        depfile="$out.d",
        deps="gcc",
    )

    clippy = RuleTemplate(
        name=CLIPPY_RULE,
        # clippy-driver runs the rustc backend and must produce some output;
        # metadata is the smallest.
        command=(
            f"{toolchain.clippy_cmd} "
            "--emit metadata -o $out $in ${libFlags} $rustcFlags $clippyFlags"
        ),
        arg_names=("rustcFlags", "libFlags", "clippyFlags"),
        command_deps=(toolchain.clippy_cmd,),
    )

    zip_rule = RuleTemplate(
        name=ZIP_RULE,
        command=(
            "cat $out.rsp | tr ' ' '\\n' | tr -d \\' | sort -u > ${out}.tmp && "
            f"{toolchain.zip_cmd} -o ${{out}} -C {toolchain.out_dir} -l ${{out}}.tmp"
        ),
        command_deps=(toolchain.zip_cmd,),
        rspfile="$out.rsp",
        rspfile_content="$in",
    )

    return RuleSet(rustc=rustc, clippy=clippy, zip=zip_rule)
