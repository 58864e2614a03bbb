"""Render rules and build actions as a ninja manifest.

The build-graph engine consumes BuildActions directly; this writer produces
the equivalent ninja text so a plan can be inspected or handed to ninja.

Example output:
    rule rustc
      command = prebuilts/rust/bin/rustc ... $rustcFlags
      description = $desc
      depfile = $out.d
      deps = gcc

    build out/libfoo.rlib | out/libfoo.gcno: rustc src/lib.rs | out/libbar.rlib
      desc = rustc src/lib.rs
      rustcFlags = --crate-type=rlib ...
"""

from typing import Iterable, List

from .build.models import BuildAction
from .build.rules import RuleSet, RuleTemplate

INDENT = "  "


def escape_path(path: str) -> str:
    """Escape a path for a build line."""
    return path.replace("$", "$$").replace(" ", "$ ").replace(":", "$:")


def escape_value(value: str) -> str:
    """Escape a variable value; "$" is the only special character."""
    return value.replace("$", "$$")


def render_rule(rule: RuleTemplate) -> List[str]:
    lines = [f"rule {rule.name}", f"{INDENT}command = {rule.command}", f"{INDENT}description = $desc"]
    if rule.depfile:
        lines.append(f"{INDENT}depfile = {rule.depfile}")
    if rule.deps:
        lines.append(f"{INDENT}deps = {rule.deps}")
    if rule.rspfile:
        lines.append(f"{INDENT}rspfile = {rule.rspfile}")
        lines.append(f"{INDENT}rspfile_content = {rule.rspfile_content}")
    return lines


def render_build(action: BuildAction, rule: RuleTemplate) -> List[str]:
    """Render one build statement.

    The rule's command deps are added to the implicit inputs so a toolchain
    update reruns the action.
    """
    outputs = escape_path(action.output)
    if action.implicit_outputs:
        outputs += " | " + " ".join(escape_path(p) for p in action.implicit_outputs)

    line = f"build {outputs}: {rule.name}"
    if action.inputs:
        line += " " + " ".join(escape_path(p) for p in action.inputs)
    implicits = list(action.implicits) + list(rule.command_deps)
    if implicits:
        line += " | " + " ".join(escape_path(p) for p in implicits)

    lines = [line, f"{INDENT}desc = {escape_value(action.description)}"]
    for name, value in action.args.items():
        lines.append(f"{INDENT}{name} = {escape_value(value)}")
    return lines


def write_manifest(actions: Iterable[BuildAction], rules: RuleSet) -> str:
    """Render the rules used by actions followed by one build per action.

    Rules appear once, in order of first use.

    Raises:
        UnknownRuleError: If an action names an undeclared rule
        UnknownRuleArgumentError: If an action sets an undeclared argument
    """
    actions = list(actions)
    used: List[RuleTemplate] = []
    for action in actions:
        rule = rules.validate(action)
        if rule not in used:
            used.append(rule)

    blocks = [render_rule(rule) for rule in used]
    blocks.extend(render_build(action, rules.get(action.rule)) for action in actions)
    return "\n\n".join("\n".join(block) for block in blocks) + "\n"
