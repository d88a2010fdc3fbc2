"""
Interpreter configuration.

Fixed limits and file-resolution settings used across a run. The defaults
match the reference ZR# interpreter; the CLI and tests override them
through InterpreterConfig.with_overrides().

Author: xwest
"""

from dataclasses import dataclass, replace, fields


@dataclass(frozen=True)
class InterpreterConfig:
    """Settings shared by the parser, evaluator and module loader."""
    source_extension: str = ".zr"
    library_dir: str = "files"              # searched under the root directory
    max_block_statements: int = 1000
    max_nesting_depth: int = 100            # nested blocks and parentheses
    max_symbols: int = 256
    max_modules: int = 64
    max_path_length: int = 1024
    strict: bool = False                    # top-level runtime errors fail the run

    def __post_init__(self):
        for name in (
                "max_block_statements", "max_nesting_depth", "max_symbols",
                "max_modules", "max_path_length"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)}")
        if not self.source_extension.startswith("."):
            raise ValueError(f"source_extension must start with '.', got {self.source_extension!r}")

    def with_overrides(self, **overrides) -> "InterpreterConfig":
        """Return a copy with the given fields replaced; None values are ignored."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


DEFAULT_CONFIG = InterpreterConfig()
