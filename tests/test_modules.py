"""
Test suite for ZR# module inclusion.

Tests cover:
- Resolution order: including directory, root files/ directory, absolute
- Canonical paths (symlinks, `..` spellings)
- Depth-first loading ahead of the including file
- Cycle and duplicate detection, missing and unreadable modules
- Registry capacity and path length limits

Author: xwest
"""

import io
import os
import sys
import tempfile
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from zrlang.config import InterpreterConfig
from zrlang.diagnostics import CapacityError
from zrlang.modules.errors import ModuleError
from zrlang.parser.errors import ParseError
from zrlang.parser.ast_nodes import release_tree
from zrlang.parser.parser import parse_string
from zrlang.modules.registry import ModuleRegistry, ModuleState
from zrlang.modules.resolver import ModuleResolver, ResolutionContext
from zrlang.session import Session


class ModuleTestCase(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = os.path.realpath(self._tmp.name)
        self.output = io.StringIO()
        self.errors = io.StringIO()

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, relative: str, source: str) -> str:
        path = os.path.join(self.root, relative)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(source)
        return path

    def session(self, **overrides) -> Session:
        config = InterpreterConfig().with_overrides(**overrides)
        return Session(config, output=self.output, errors=self.errors)

    def run_main(self, main_source: str, **overrides):
        path = self.write("main.zr", main_source)
        with self.session(**overrides) as session:
            return session.run_file(path)

    @property
    def printed(self) -> str:
        return self.output.getvalue()


class TestResolver(ModuleTestCase):

    def test_candidate_order(self):
        resolver = ModuleResolver()
        context = ResolutionContext(os.path.join(self.root, "sub"), self.root)
        self.assertEqual(resolver.candidates("util", context), [
            os.path.join(self.root, "sub", "util.zr"),
            os.path.join(self.root, "files", "util.zr"),
        ])

    def test_including_directory_wins(self):
        local = self.write("sub/util.zr", "")
        self.write("files/util.zr", "")
        context = ResolutionContext(os.path.join(self.root, "sub"), self.root)
        self.assertEqual(ModuleResolver().resolve("util", context), local)

    def test_falls_back_to_files_directory(self):
        library = self.write("files/util.zr", "")
        context = ResolutionContext(os.path.join(self.root, "sub"), self.root)
        self.assertEqual(ModuleResolver().resolve("util", context), library)

    def test_absolute_target(self):
        target = self.write("elsewhere/abs.zr", "")
        context = ResolutionContext(os.path.join(self.root, "sub"), self.root)
        target_path = os.path.join(self.root, "elsewhere", "abs")
        self.assertEqual(ModuleResolver().resolve(target_path, context), target)

    def test_not_found_lists_tried_paths(self):
        context = ResolutionContext(self.root, self.root)
        with self.assertRaises(ModuleError) as ctx:
            ModuleResolver().resolve("nothere", context)
        self.assertEqual(ctx.exception.code, "M001")
        self.assertEqual(len(ctx.exception.diagnostic.suggestions), 2)

    def test_directory_is_not_a_module(self):
        os.makedirs(os.path.join(self.root, "pkg.zr"))
        with self.assertRaises(ModuleError):
            ModuleResolver().resolve("pkg", ResolutionContext(self.root, self.root))

    def test_path_too_long(self):
        resolver = ModuleResolver(InterpreterConfig(max_path_length=8))
        with self.assertRaises(ModuleError) as ctx:
            resolver.resolve("abcdefgh", ResolutionContext(self.root, self.root))
        self.assertEqual(ctx.exception.code, "M004")

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks not available")
    def test_symlink_is_canonicalised(self):
        target = self.write("util.zr", "")
        try:
            os.symlink(target, os.path.join(self.root, "alias.zr"))
        except OSError:
            self.skipTest("cannot create symlinks here")
        context = ResolutionContext(self.root, self.root)
        self.assertEqual(ModuleResolver().resolve("alias", context), target)


class TestRegistry(unittest.TestCase):

    def test_register_and_state(self):
        registry = ModuleRegistry(capacity=4)
        registry.register("/a.zr")
        self.assertIn("/a.zr", registry)
        self.assertEqual(registry.state("/a.zr"), ModuleState.LOADING)
        registry.mark_loaded("/a.zr")
        self.assertEqual(registry.state("/a.zr"), ModuleState.LOADED)

    def test_duplicate_while_loading_is_a_cycle(self):
        registry = ModuleRegistry()
        registry.register("/a.zr")
        with self.assertRaises(ModuleError) as ctx:
            registry.register("/a.zr")
        self.assertEqual(ctx.exception.code, "M002")
        self.assertIn("Circular", ctx.exception.message)

    def test_duplicate_after_loading(self):
        registry = ModuleRegistry()
        registry.register("/a.zr")
        registry.mark_loaded("/a.zr")
        with self.assertRaises(ModuleError) as ctx:
            registry.register("/a.zr")
        self.assertIn("already loaded", ctx.exception.message)

    def test_capacity(self):
        registry = ModuleRegistry(capacity=1)
        registry.register("/a.zr")
        with self.assertRaises(CapacityError) as ctx:
            registry.register("/b.zr")
        self.assertEqual(ctx.exception.code, "C002")

    def test_paths_keep_registration_order(self):
        registry = ModuleRegistry()
        for path in ("/c.zr", "/a.zr", "/b.zr"):
            registry.register(path)
        self.assertEqual(registry.paths(), ["/c.zr", "/a.zr", "/b.zr"])
        registry.clear()
        self.assertEqual(len(registry), 0)


class TestLoading(ModuleTestCase):

    def test_module_runs_before_including_file(self):
        self.write("util.zr", 'let x = 5; print "util";')
        self.run_main('print "before"; loadin "util"; print x;')
        self.assertEqual(self.printed, "util\nbefore\n5\n")

    def test_nested_includes_are_depth_first(self):
        self.write("a.zr", 'loadin "b"; print "a";')
        self.write("b.zr", 'print "b";')
        self.write("c.zr", 'print "c";')
        result = self.run_main('loadin "a"; loadin "c"; print "main";')

        self.assertEqual(self.printed, "b\na\nc\nmain\n")
        self.assertEqual([os.path.basename(p) for p in result.modules],
                         ["main.zr", "a.zr", "b.zr", "c.zr"])

    def test_module_resolves_relative_to_itself(self):
        self.write("lib/outer.zr", 'loadin "inner"; print "outer";')
        self.write("lib/inner.zr", 'print "inner";')
        self.run_main('loadin "lib/outer";')
        self.assertEqual(self.printed, "inner\nouter\n")

    def test_files_directory_under_root(self):
        self.write("files/shared.zr", 'let greeting = "hello";')
        self.write("lib/user.zr", 'loadin "shared"; print greeting;')
        self.run_main('loadin "lib/user";')
        self.assertEqual(self.printed, "hello\n")

    def test_mutual_include_is_fatal(self):
        a = self.write("a.zr", 'loadin "b"; print "a";')
        self.write("b.zr", 'loadin "a"; print "b";')

        with self.session() as session:
            with self.assertRaises(ModuleError) as ctx:
                session.run_file(a)

        self.assertEqual(ctx.exception.code, "M002")
        self.assertEqual(ctx.exception.path, a)
        self.assertEqual(self.printed, "")

    def test_self_include_is_fatal(self):
        with self.assertRaises(ModuleError) as ctx:
            self.run_main('loadin "main"; print "never";')
        self.assertEqual(ctx.exception.code, "M002")
        self.assertEqual(self.printed, "")

    def test_diamond_include_is_rejected(self):
        self.write("b.zr", 'loadin "d"; print "b";')
        self.write("c.zr", 'loadin "d"; print "c";')
        self.write("d.zr", 'print "d";')

        with self.assertRaises(ModuleError) as ctx:
            self.run_main('loadin "b"; loadin "c";')
        self.assertEqual(ctx.exception.code, "M002")
        self.assertIn("already loaded", ctx.exception.message)
        self.assertEqual(self.printed, "d\nb\n")

    def test_same_file_through_another_spelling(self):
        self.write("util.zr", 'print "util";')
        os.makedirs(os.path.join(self.root, "sub"))
        with self.assertRaises(ModuleError) as ctx:
            self.run_main('loadin "util"; loadin "sub/../util";')
        self.assertEqual(ctx.exception.code, "M002")

    def test_missing_module(self):
        with self.assertRaises(ModuleError) as ctx:
            self.run_main('print "never"; loadin "ghost";')
        self.assertEqual(ctx.exception.code, "M001")
        self.assertEqual(ctx.exception.location.line, 1)
        self.assertEqual(self.printed, "")

    def test_unreadable_module(self):
        path = os.path.join(self.root, "binary.zr")
        with open(path, "wb") as f:
            f.write(b"\xff\xfe\xfa")
        with self.assertRaises(ModuleError) as ctx:
            self.run_main('loadin "binary";')
        self.assertEqual(ctx.exception.code, "M003")

    def test_registry_capacity(self):
        self.write("util.zr", "")
        with self.assertRaises(CapacityError) as ctx:
            self.run_main('loadin "util";', max_modules=1)
        self.assertEqual(ctx.exception.code, "C002")

    def test_syntax_error_in_module_is_fatal(self):
        self.write("broken.zr", "let = 1;")
        with self.assertRaises(ParseError) as ctx:
            self.run_main('loadin "broken"; print "never";')
        self.assertEqual(ctx.exception.code, "P001")
        self.assertTrue(str(ctx.exception.location).endswith("broken.zr:1:5"))
        self.assertEqual(self.printed, "")

    def test_runtime_errors_in_module_do_not_stop_the_run(self):
        self.write("util.zr", "print 1/0; let z = 7;")
        result = self.run_main("loadin \"util\"; print z;")

        self.assertEqual(self.printed, "7\n")
        self.assertEqual([e.code for e in result.errors], ["R002"])
        self.assertIn("ERROR[R002]: Division by zero", self.errors.getvalue())

    def test_splice_moves_statements_out_of_parsed_file(self):
        self.write("util.zr", 'print "util";')
        program = parse_string('let a = 1; loadin "util"; print a;', "main.zr")
        include = program.statements[1]
        statements = [program.statements[0], program.statements[2]]

        with self.session() as session:
            spliced = session.loader._splice(program, ResolutionContext(self.root, self.root))

            self.assertEqual(program.statements, [])
            self.assertEqual(spliced.statements, statements)
            for stmt in spliced.statements:
                self.assertIs(stmt.parent, spliced)
            self.assertTrue(include.released)
            self.assertEqual(self.printed, "util\n")

            # Each node is released once, through its single owner
            self.assertEqual(release_tree(program), 1)
            self.assertEqual(release_tree(spliced), 5)

    def test_missing_initial_file(self):
        with self.session() as session:
            with self.assertRaises(ModuleError) as ctx:
                session.run_file(os.path.join(self.root, "absent.zr"))
        self.assertEqual(ctx.exception.code, "M001")


def run_module_tests():
    """Run all module tests."""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()
    for case in (TestResolver, TestRegistry, TestLoading):
        suite.addTest(loader.loadTestsFromTestCase(case))

    runner = unittest.TextTestRunner(verbosity=2)
    return runner.run(suite)


if __name__ == "__main__":
    print("Running ZR# Module Tests...")
    print("=" * 60)

    result = run_module_tests()

    print("\n" + "=" * 60)
    if result.wasSuccessful():
        print("✅ All tests passed!")
    else:
        print("❌ Some tests failed.")
