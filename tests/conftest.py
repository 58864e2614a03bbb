"""Pytest configuration and shared fixtures for rbuild tests."""

import pytest

from rbuild.build import (
    BuildContext,
    CompilationRequest,
    CrateKind,
    DependencySet,
    FlagConfiguration,
    RustLibrary,
)
from rbuild.toolchain_configs import ToolchainConfig


@pytest.fixture
def toolchain() -> ToolchainConfig:
    """A small toolchain config with predictable paths."""
    return ToolchainConfig(
        name="test",
        rust_bin="prebuilts/rust/bin",
        rust_linker="prebuilts/clang/bin/clang++",
        zip_cmd="out/host/bin/soong_zip",
        rust_linker_args=["-nostdlib", "-Wl,--gc-sections"],
        pwd_prefix="PWD=/proc/self/cwd",
        out_dir="out",
    )


@pytest.fixture
def context(toolchain) -> BuildContext:
    return BuildContext.create(toolchain)


@pytest.fixture
def make_request():
    """Factory for CompilationRequest with sensible defaults."""

    def _make(**overrides) -> CompilationRequest:
        defaults = {
            "main_source": "external/foo/src/lib.rs",
            "crate_name": "foo",
            "crate_kind": CrateKind.RLIB,
            "output_path": "out/foo/libfoo.rlib",
        }
        defaults.update(overrides)
        return CompilationRequest(**defaults)

    return _make


@pytest.fixture
def sample_deps() -> DependencySet:
    """One dependency of every kind plus a CRT pair."""
    return DependencySet.create(
        rlibs=(RustLibrary("alpha", "out/alpha/libalpha.rlib"),),
        dylibs=(RustLibrary("beta", "out/beta/libbeta.so"),),
        proc_macros=(RustLibrary("gamma_derive", "out/gamma/libgamma_derive.so"),),
        static_libs=("out/native/libz.a",),
        shared_libs=("out/native/liblog.so",),
        crt_begin="out/crt/crtbegin.o",
        crt_end="out/crt/crtend.o",
    )


@pytest.fixture
def plain_flags() -> FlagConfiguration:
    return FlagConfiguration(
        global_rust_flags=("-C opt-level=3",),
        rust_flags=("--cfg", "feature=\"std\""),
        global_link_flags=("-Wl,--build-id",),
        link_flags=("-lm",),
    )
