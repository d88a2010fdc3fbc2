"""
Module loader: the per-file driver.

For every file (the initial one included) the loader parses the source,
walks its top-level statements in order and loads each `loadin` target
eagerly, depth first, before anything in the including file runs. The
remaining statements are spliced, in order, into a fresh Block that the
evaluator runs; the parsed tree is released afterwards.

Author: xwest
"""

import logging
import os
from typing import List, Optional, TYPE_CHECKING

from ..lexer.lexer import Lexer
from ..lexer.tokens import SourceLocation
from ..parser.ast_nodes import ASTNode, Block, ModuleInclude, release_tree
from ..parser.parser import Parser
from ..interpreter.evaluator import ProgramResult
from .errors import create_module_not_found_error, create_module_read_error
from .resolver import ModuleResolver, ResolutionContext

if TYPE_CHECKING:
    from ..session import Session

logger = logging.getLogger(__name__)


class ModuleLoader:
    """Loads files into a session, resolving `loadin` statements as it goes."""

    def __init__(self, session: "Session"):
        self.session = session
        self.resolver = ModuleResolver(session.config)

    def load_file(self, path: str) -> ProgramResult:
        """
        Run the initial file of a session.

        The file is registered like any module, and its directory becomes
        the root directory for `files/` lookups.

        Raises:
            FatalError: on lex, parse, module or capacity failures
        """
        if not os.path.isfile(path):
            raise create_module_not_found_error(path, [path], None)

        canonical = os.path.realpath(path)
        root_dir = os.path.dirname(canonical)
        self.session.registry.register(canonical)

        source = self._read(canonical, None)
        return self._run(source, canonical, ResolutionContext(root_dir, root_dir))

    def load_source(self, source: str, filename: str = "<string>",
                    directory: Optional[str] = None) -> ProgramResult:
        """
        Run source text that does not come from a registered file.

        `directory` (the working directory by default) serves both as the
        including directory and as the root directory.
        """
        base = os.path.realpath(directory or os.getcwd())
        return self._run(source, filename, ResolutionContext(base, base))

    def _run(self, source: str, filename: str, context: ResolutionContext) -> ProgramResult:
        logger.debug("parsing %s", filename)
        program = Parser(Lexer(source, filename), self.session.config).parse()

        spliced = self._splice(program, context)
        logger.debug("running %d statements from %s", len(spliced.statements), filename)
        result = self.session.evaluator.run_program(spliced, self.session.report)

        released = release_tree(spliced) + release_tree(program)
        logger.debug("released %d nodes from %s", released, filename)

        if filename in self.session.registry:
            self.session.registry.mark_loaded(filename)
        return result

    def _splice(self, program: Block, context: ResolutionContext) -> Block:
        """
        Load every `loadin` of a parsed file and move the other statements,
        in order, into a new Block. The parsed root is left empty so each
        statement has exactly one owner.
        """
        body: List[ASTNode] = []
        for stmt in program.statements:
            if isinstance(stmt, ModuleInclude):
                self._include(stmt, context)
                release_tree(stmt)
            else:
                body.append(stmt)

        program.statements = []
        return Block(body, program.span)

    def _include(self, stmt: ModuleInclude, context: ResolutionContext):
        canonical = self.resolver.resolve(stmt.path, context, stmt.location)
        self.session.registry.register(canonical, stmt.location)

        source = self._read(canonical, stmt.location)
        logger.info("loading module %s", canonical)
        self._run(source, canonical, context.for_file(canonical))

    def _read(self, path: str, location: Optional[SourceLocation]) -> str:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise create_module_read_error(path, str(e), location) from e
