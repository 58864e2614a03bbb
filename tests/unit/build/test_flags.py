"""Tests for compiler and linker flag assembly."""

import pytest

from rbuild.build.errors import InvalidCrateKindError
from rbuild.build.flags import (
    LTO_FLAG,
    SYSROOT_FLAG,
    assemble_link_flags,
    assemble_rust_flags,
    join_flags,
    lto_enabled,
)
from rbuild.build.models import CrateKind, FlagConfiguration


class TestLtoPolicy:
    """Test which crate kinds get link-time optimization."""

    @pytest.mark.parametrize("kind", [CrateKind.BINARY, CrateKind.STATICLIB, CrateKind.CDYLIB])
    def test_final_artifacts_get_lto(self, kind):
        assert lto_enabled(kind) is True

    @pytest.mark.parametrize("kind", [CrateKind.RLIB, CrateKind.DYLIB, CrateKind.PROC_MACRO])
    def test_intermediate_libraries_skip_lto(self, kind):
        assert lto_enabled(kind) is False

    def test_policy_covers_every_kind(self):
        """Every kind gets an answer; none falls through to the error."""
        for kind in CrateKind:
            assert isinstance(lto_enabled(kind), bool)

    def test_string_kind_raises(self):
        with pytest.raises(InvalidCrateKindError):
            lto_enabled("bin")


class TestRustFlags:
    """Test rustc flag assembly."""

    def test_order(self, make_request):
        flags = FlagConfiguration(global_rust_flags=("-g1", "-g2"), rust_flags=("-u1",))
        request = make_request(crate_name="foo", target_triple="x86_64-unknown-linux-gnu")

        result = assemble_rust_flags(flags, request, CrateKind.RLIB)

        assert result == [
            "-g1",
            "-g2",
            "-u1",
            "--crate-type=rlib",
            "--crate-name=foo",
            "--target=x86_64-unknown-linux-gnu",
            "--sysroot=/dev/null",
        ]

    def test_empty_crate_name_omits_flag(self, make_request):
        result = assemble_rust_flags(FlagConfiguration(), make_request(crate_name=""), CrateKind.RLIB)
        assert not any(f.startswith("--crate-name") for f in result)

    def test_crate_name_appears_once(self, make_request):
        result = assemble_rust_flags(FlagConfiguration(), make_request(crate_name="foo"), CrateKind.RLIB)
        assert result.count("--crate-name=foo") == 1

    def test_empty_target_omits_flag(self, make_request):
        result = assemble_rust_flags(FlagConfiguration(), make_request(target_triple=""), CrateKind.RLIB)
        assert not any(f.startswith("--target") for f in result)

    def test_sysroot_always_last(self, make_request):
        result = assemble_rust_flags(FlagConfiguration(), make_request(), CrateKind.CDYLIB)
        assert result[-1] == SYSROOT_FLAG

    @pytest.mark.parametrize("kind", list(CrateKind))
    def test_crate_type_token(self, make_request, kind):
        result = assemble_rust_flags(FlagConfiguration(), make_request(crate_kind=kind), kind)
        assert f"--crate-type={kind.value}" in result

    def test_lto_stays_with_per_unit_flags(self, make_request):
        """LTO requested by an entry variant sits after the per-unit flags."""
        flags = FlagConfiguration(rust_flags=("-u1",)).with_rust_flags(LTO_FLAG)
        result = assemble_rust_flags(flags, make_request(crate_kind=CrateKind.BINARY), CrateKind.BINARY)
        assert result[:3] == ["-u1", "-C lto", "--crate-type=bin"]

    def test_does_not_mutate_configuration(self, make_request):
        flags = FlagConfiguration(rust_flags=("-u1",))
        assemble_rust_flags(flags, make_request(), CrateKind.RLIB)
        assert flags.rust_flags == ("-u1",)

    def test_invalid_kind_raises(self, make_request):
        with pytest.raises(InvalidCrateKindError):
            assemble_rust_flags(FlagConfiguration(), make_request(), "rlib")


class TestLinkFlags:
    """Test linker flag assembly."""

    def test_order_with_target(self, make_request):
        flags = FlagConfiguration(global_link_flags=("-Wl,-z,now",), link_flags=("-lm",))
        result = assemble_link_flags(flags, make_request(target_triple="aarch64-linux-android"))
        assert result == ["-Wl,-z,now", "-lm", "-target aarch64-linux-android"]

    def test_empty_target_omits_flag(self, make_request):
        flags = FlagConfiguration(global_link_flags=("-Wl,-z,now",))
        result = assemble_link_flags(flags, make_request(target_triple=""))
        assert result == ["-Wl,-z,now"]
        assert not any(f.startswith("-target ") for f in result)


def test_join_flags():
    assert join_flags(["-a", "-b c"]) == "-a -b c"
    assert join_flags([]) == ""
