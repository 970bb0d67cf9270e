"""
Result module behavioral tests.

Scope
- Validate Ok / Err construction, immutability and structural matching.
- Validate isok / iserr totality and exclusivity, and rejection of non-results.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import dataclasses
import unittest
from unittest import TestCase

from argosy import Err, Ok, Result, err, iserr, isok, ok


class TestResult(TestCase):
    """Behavioral tests for the two-variant outcome type."""

    def testConstructorsBuildVariants(self):
        self.assertEqual(ok(3), Ok(3))
        self.assertEqual(err("boom"), Err("boom"))
        self.assertNotEqual(ok(3), err(3))

    def testPredicatesAreExclusive(self):
        for result in (ok(None), ok(0), err(None), err("")):
            self.assertNotEqual(isok(result), iserr(result))

    def testFalseyPayloadsStayOk(self):
        # the payload never decides the variant
        self.assertTrue(isok(ok(False)))
        self.assertTrue(iserr(err(0)))

    def testPredicatesRejectNonResults(self):
        with self.assertRaises(TypeError):
            isok(3)
        with self.assertRaises(TypeError):
            iserr(None)

    def testVariantsAreFrozen(self):
        with self.assertRaises(dataclasses.FrozenInstanceError):
            ok(1).value = 2  # type: ignore[misc]
        with self.assertRaises(dataclasses.FrozenInstanceError):
            err(1).error = 2  # type: ignore[misc]

    def testStructuralMatching(self):
        def describe(result):
            match result:
                case Ok(value):
                    return "ok", value
                case Err(error):
                    return "err", error

        self.assertEqual(describe(ok(1)), ("ok", 1))
        self.assertEqual(describe(err("x")), ("err", "x"))

    def testResultUnionInIsinstance(self):
        self.assertIsInstance(ok(1), Result)
        self.assertIsInstance(err(1), Result)
        self.assertNotIsInstance(1, Result)


if __name__ == "__main__":
    unittest.main()
