"""
Interpreter session.

A Session owns all state of one run: configuration, the symbol table, the
module registry, the evaluator and the loader. Nothing is global, so
several sessions can coexist in one process (the test-suite relies on
this).

Author: xwest
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from .config import InterpreterConfig, DEFAULT_CONFIG
from .interpreter.evaluator import Evaluator
from .interpreter.errors import to_diagnostic
from .interpreter.symbol_table import SymbolTable
from .interpreter.values import Value
from .modules.loader import ModuleLoader
from .modules.registry import ModuleRegistry

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Runtime errors reported while running a program and its modules."""
    errors: List[Value] = field(default_factory=list)
    modules: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class Session:
    """
    One interpreter run.

    `print` output goes to `output` (stdout by default) and top-level
    runtime errors are rendered to `errors` (stderr by default). Fatal
    errors are not caught here; they propagate to the caller.
    """

    def __init__(self, config: Optional[InterpreterConfig] = None,
                 output: Optional[TextIO] = None,
                 errors: Optional[TextIO] = None):
        self.config = config or DEFAULT_CONFIG
        self.errors = errors if errors is not None else sys.stderr

        self.symbols = SymbolTable(self.config.max_symbols)
        self.registry = ModuleRegistry(self.config.max_modules)
        self.evaluator = Evaluator(self.symbols, output)
        self.loader = ModuleLoader(self)

        self._reported: List[Value] = []
        self.closed = False

    def report(self, error: Value):
        """Render a top-level runtime error and record it."""
        self._reported.append(error)
        self.errors.write(str(to_diagnostic(error)))
        self.errors.flush()

    def run_file(self, path: str) -> RunResult:
        """
        Run a program file and everything it includes.

        Raises:
            FatalError: on lex, parse, module or capacity failures
        """
        self._ensure_open()
        logger.debug("running file %s", path)
        start = len(self._reported)
        self.loader.load_file(path)
        return RunResult(self._reported[start:], self.registry.paths())

    def run_source(self, source: str, filename: str = "<string>",
                   directory: Optional[str] = None) -> RunResult:
        """Run program text; `loadin` targets are resolved against `directory`."""
        self._ensure_open()
        start = len(self._reported)
        self.loader.load_source(source, filename, directory)
        return RunResult(self._reported[start:], self.registry.paths())

    def close(self):
        """Tear down the session: drop all symbols and registered modules."""
        if self.closed:
            return
        logger.debug("closing session: %d symbols, %d modules",
                     len(self.symbols), len(self.registry))
        self.symbols.clear()
        self.registry.clear()
        self.closed = True

    def _ensure_open(self):
        if self.closed:
            raise RuntimeError("Session is closed")

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
