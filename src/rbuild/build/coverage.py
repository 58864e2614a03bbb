"""Coverage instrumentation paths and the coverage archive action.

Coverage builds write a gcno notes file at compile time and a gcda data file
at run time. Both paths are derived from the compile action's output path so
that the -Z profile-emit flag and the declared gcno output always agree.
"""

import logging
import posixpath
from dataclasses import dataclass
from typing import Iterable, Optional

from .models import BuildAction
from .rules import ZIP_RULE

logger = logging.getLogger(__name__)

NOTES_EXTENSION = "gcno"
DATA_EXTENSION = "gcda"


@dataclass(frozen=True)
class CoverageArtifact:
    """Coverage notes and data paths for one compile output."""

    notes_path: str
    data_path: str


def extension(path: str) -> str:
    """Return the extension of the last path component, including the dot.

    Returns "" when the last component has no dot.
    """
    base = posixpath.basename(path)
    dot = base.rfind(".")
    return base[dot:] if dot != -1 else ""


def replace_extension(path: str, ext: str) -> str:
    """Replace the extension of path with ext (given without a dot)."""
    current = extension(path)
    stem = path[: len(path) - len(current)] if current else path
    return f"{stem}.{ext}"


def derive_coverage_paths(output_path: str) -> CoverageArtifact:
    """Derive gcno/gcda paths for a compile output.

    "out/libbar.rlib" gives "out/libbar.gcno" and "out/libbar.gcda";
    an output without an extension gets ".gcno"/".gcda" appended.

    Args:
        output_path: The exact output path of the compile action

    Returns:
        CoverageArtifact with notes and data paths
    """
    if extension(output_path):
        return CoverageArtifact(
            notes_path=replace_extension(output_path, NOTES_EXTENSION),
            data_path=replace_extension(output_path, DATA_EXTENSION),
        )
    return CoverageArtifact(
        notes_path=f"{output_path}.{NOTES_EXTENSION}",
        data_path=f"{output_path}.{DATA_EXTENSION}",
    )


def profile_emit_prefix(pwd_prefix: str) -> str:
    """Strip the "PWD=" assignment from a pwd prefix (e.g. "PWD=/proc/self/cwd")."""
    return pwd_prefix[len("PWD="):] if pwd_prefix.startswith("PWD=") else pwd_prefix


def profile_emit_flag(prefix: str, data_path: str) -> str:
    """Format the rustc flag that directs gcda output to data_path."""
    return f"-Z profile-emit={prefix}/{data_path}"


def transform_coverage_files_to_zip(
    cov_files: Iterable[str], base_name: str, out_dir: Optional[str] = None
) -> Optional[BuildAction]:
    """Create an action archiving coverage notes files into one zip.

    The same gcno file can be reported by several units; inputs are
    deduplicated and sorted so each appears once in the archive.

    Args:
        cov_files: Coverage notes paths collected from crate builds
        base_name: Archive base name; the output is "<base_name>.zip"
        out_dir: Directory for the archive, or None to use base_name as given

    Returns:
        The zip BuildAction, or None when there are no coverage files
    """
    inputs = tuple(sorted(set(cov_files)))
    if not inputs:
        return None

    output_file = f"{base_name}.zip"
    if out_dir:
        output_file = posixpath.join(out_dir, output_file)

    logger.debug(f"Archiving {len(inputs)} coverage files into {output_file}")
    return BuildAction(
        rule=ZIP_RULE,
        description=f"zip {posixpath.basename(output_file)}",
        output=output_file,
        inputs=inputs,
    )
