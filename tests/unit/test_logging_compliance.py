"""Unit tests for logging compliance across the codebase.

These tests enforce that library code reports through the logging module
and leaves stdout to the CLI.
"""

import re
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).parent.parent.parent / "src" / "rbuild"


def _source_files():
    return [p for p in SRC_DIR.rglob("*.py") if "__pycache__" not in str(p)]


class TestLoggingCompliance:
    """Test cases for logging vs print statement compliance."""

    def test_source_found(self):
        assert SRC_DIR.exists(), f"Source directory not found: {SRC_DIR}"
        assert len(_source_files()) > 0, "No Python files found in src/rbuild"

    def test_no_print_statements_in_library_code(self):
        """Only the CLI writes to stdout."""
        violations = []

        for file_path in _source_files():
            if file_path.name == "cli.py":
                continue

            for line_num, line in enumerate(file_path.read_text(encoding="utf-8").split("\n"), start=1):
                if line.strip().startswith("#"):
                    continue
                if re.search(r"\bprint\s*\(", line) or re.search(r"\bstdout\s*\.\s*write\s*\(", line):
                    violations.append(f"{file_path}:{line_num}: {line.strip()}")

        if violations:
            violation_report = "\n".join(violations)
            pytest.fail(f"Found {len(violations)} stdout writes in library code:\n{violation_report}")

    def test_logging_imports_present(self):
        """Files calling logger.* define a module logger."""
        violations = []

        for file_path in _source_files():
            content = file_path.read_text(encoding="utf-8")
            if re.search(r"\blogger\.(debug|info|warning|error)\(", content):
                if "logger = logging.getLogger(__name__)" not in content:
                    violations.append(str(file_path))

        assert not violations, f"Files log without a module logger: {violations}"

    def test_build_core_logs_only_debug(self):
        """Action synthesis runs per crate; it must stay quiet above DEBUG."""
        violations = []

        for file_path in (SRC_DIR / "build").rglob("*.py"):
            for line_num, line in enumerate(file_path.read_text(encoding="utf-8").split("\n"), start=1):
                if re.search(r"\blogger\.(info|warning|error)\(", line):
                    violations.append(f"{file_path}:{line_num}: {line.strip()}")

        assert not violations, "\n".join(violations)
