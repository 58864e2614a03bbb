"""rbuild - build-action synthesis for Rust crates.

Describes the rustc/clippy/zip actions an incremental build-graph engine
needs for one compilation unit. Nothing here runs a compiler.
"""

__version__ = "0.1.0"
