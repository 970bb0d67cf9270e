"""
Package surface tests.

Scope
- Validate that the package imports and that every name listed in __all__ resolves.
- Validate that exported factories do not hide the submodules they share a name with.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import importlib
import sys
import types
import unittest
from unittest import TestCase

import argosy


class TestPackage(TestCase):
    """Behavioral tests for the top-level exports."""

    def testEveryExportResolves(self):
        for name in argosy.__all__:
            with self.subTest(name=name):
                self.assertTrue(hasattr(argosy, name))

    def testExportsCoverEveryLayer(self):
        for name in ("ok", "integer", "positional", "circuitbreaker", "command", "subcommands", "Outcome", "run", "trigger"):
            with self.subTest(name=name):
                self.assertIn(name, argosy.__all__)

    def testFactoryShadowsSubmoduleAttributeOnly(self):
        self.assertIsInstance(argosy.subcommands("tool", {"build": argosy.command("build", {}, lambda: None)}), argosy.Subcommands)
        self.assertIsInstance(sys.modules["argosy.subcommands"], types.ModuleType)
        self.assertIs(importlib.import_module("argosy.subcommands").Subcommands, argosy.Subcommands)

    def testVersionInfo(self):
        self.assertEqual(argosy.version_info[:3], (0, 1, 0))
        self.assertEqual(argosy.__version__, "0.1.0")


if __name__ == "__main__":
    unittest.main()
