"""
Type-safe toolchain configuration model.

Holds the toolchain paths the rule templates are built from. Paths are
recorded as given; nothing here checks that they exist.
"""

import posixpath
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..build.errors import ToolchainConfigError


@dataclass(frozen=True)
class ToolchainConfig:
    """
    Toolchain configuration for rustc, clippy-driver and the zip tool.

    Attributes:
        name: Configuration name (e.g. "default")
        rust_bin: Directory holding rustc and clippy-driver
        rust_linker: Linker passed to rustc via -C linker
        rust_linker_args: Linker args placed between crtbegin and the per-crate link flags
        pwd_prefix: Prefix for absolute coverage paths, e.g. "PWD=/proc/self/cwd"
        zip_cmd: Archiver used for coverage zips
        out_dir: Root that archive members are stored relative to
    """

    name: str
    rust_bin: str
    rust_linker: str
    zip_cmd: str
    rust_linker_args: List[str] = field(default_factory=list)
    pwd_prefix: str = ""
    out_dir: str = "out"

    @property
    def rustc_cmd(self) -> str:
        return posixpath.join(self.rust_bin, "rustc")

    @property
    def clippy_cmd(self) -> str:
        return posixpath.join(self.rust_bin, "clippy-driver")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolchainConfig":
        """
        Parse toolchain configuration from dictionary.

        Args:
            data: Raw configuration dictionary from JSON

        Returns:
            ToolchainConfig instance

        Raises:
            ToolchainConfigError: If required fields are missing or invalid
        """
        try:
            name = data["name"]
            rust_bin = data["rust_bin"]
            rust_linker = data["rust_linker"]
            zip_cmd = data["zip_cmd"]
        except KeyError as e:
            raise ToolchainConfigError(f"Missing required field in toolchain config: {e}")

        linker_args = data.get("rust_linker_args", [])
        if not isinstance(linker_args, list) or not all(isinstance(a, str) for a in linker_args):
            raise ToolchainConfigError("rust_linker_args must be a list of strings")

        return cls(
            name=name,
            rust_bin=rust_bin,
            rust_linker=rust_linker,
            zip_cmd=zip_cmd,
            rust_linker_args=list(linker_args),
            pwd_prefix=data.get("pwd_prefix", ""),
            out_dir=data.get("out_dir", "out"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "name": self.name,
            "rust_bin": self.rust_bin,
            "rust_linker": self.rust_linker,
            "rust_linker_args": list(self.rust_linker_args),
            "pwd_prefix": self.pwd_prefix,
            "zip_cmd": self.zip_cmd,
            "out_dir": self.out_dir,
        }
