"""Tests for the rustc/clippy/zip rule templates."""

import dataclasses

import pytest

from rbuild.build.errors import UnknownRuleArgumentError, UnknownRuleError
from rbuild.build.models import BuildAction
from rbuild.build.rules import CLIPPY_RULE, RUSTC_RULE, ZIP_RULE, create_rules


class TestCreateRules:
    """Test rule templates built from a toolchain config."""

    def test_rustc_command(self, toolchain):
        rule = create_rules(toolchain).rustc

        assert rule.name == RUSTC_RULE
        assert rule.command.startswith("prebuilts/rust/bin/rustc -C linker=prebuilts/clang/bin/clang++ ")
        assert '-C link-args="${crtBegin} -nostdlib -Wl,--gc-sections ${linkFlags} ${crtEnd}"' in rule.command
        assert "--emit link -o $out --emit dep-info=$out.d $in ${libFlags} $rustcFlags" in rule.command
        assert rule.depfile == "$out.d"
        assert rule.deps == "gcc"
        assert rule.command_deps == ("prebuilts/rust/bin/rustc",)
        assert set(rule.arg_names) == {"rustcFlags", "linkFlags", "libFlags", "crtBegin", "crtEnd"}

    def test_clippy_command(self, toolchain):
        rule = create_rules(toolchain).clippy

        assert rule.name == CLIPPY_RULE
        assert rule.command == (
            "prebuilts/rust/bin/clippy-driver --emit metadata -o $out $in ${libFlags} $rustcFlags $clippyFlags"
        )
        assert rule.command_deps == ("prebuilts/rust/bin/clippy-driver",)
        assert rule.depfile == ""

    def test_zip_command(self, toolchain):
        rule = create_rules(toolchain).zip

        assert rule.name == ZIP_RULE
        assert "sort -u > ${out}.tmp" in rule.command
        assert "tr ' ' '\\n'" in rule.command
        assert rule.command.endswith("out/host/bin/soong_zip -o ${out} -C out -l ${out}.tmp")
        assert rule.rspfile == "$out.rsp"
        assert rule.rspfile_content == "$in"
        assert rule.arg_names == ()

    def test_rules_are_frozen(self, toolchain):
        rules = create_rules(toolchain)
        with pytest.raises(dataclasses.FrozenInstanceError):
            rules.rustc = rules.zip


class TestRuleSet:
    """Test lookup and validation."""

    def test_get(self, context):
        assert context.rules.get("clippy") is context.rules.clippy

    def test_get_unknown(self, context):
        with pytest.raises(UnknownRuleError):
            context.rules.get("cc")

    def test_iter_order(self, context):
        assert [rule.name for rule in context.rules] == ["rustc", "clippy", "zip"]

    def test_validate_accepts_declared_args(self, context):
        action = BuildAction(rule="clippy", description="", output="x.clippy", args={"clippyFlags": ""})
        assert context.rules.validate(action) is context.rules.clippy

    def test_validate_rejects_undeclared_args(self, context):
        action = BuildAction(rule="zip", description="", output="x.zip", args={"rustcFlags": "-g"})
        with pytest.raises(UnknownRuleArgumentError, match="rustcFlags"):
            context.rules.validate(action)


class TestBuildContext:
    """Test BuildContext derived values."""

    def test_profile_emit_prefix(self, context):
        assert context.profile_emit_prefix == "/proc/self/cwd"

    def test_coverage_out_dir(self, context):
        assert context.coverage_out_dir == "out"
