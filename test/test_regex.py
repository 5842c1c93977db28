# Copyright 2009-present MongoDB, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for the Regex class."""
from __future__ import annotations

import pickle
import re
import sys

sys.path[0:0] = [""]

from test import unittest

from hbson.regex import Regex, str_flags_to_int


class TestRegex(unittest.TestCase):
    def test_presentation_form(self):
        r = Regex("/^acme/i")
        self.assertEqual("^acme", r.pattern)
        self.assertEqual("i", r.flags)
        self.assertEqual("/^acme/i", str(r))

    def test_pattern_with_slashes(self):
        r = Regex("/a/b/c/mx")
        self.assertEqual("a/b/c", r.pattern)
        self.assertEqual("mx", r.flags)
        self.assertEqual("/a/b/c/mx", str(r))

    def test_no_flags(self):
        r = Regex("/abc/")
        self.assertEqual("abc", r.pattern)
        self.assertEqual("", r.flags)
        self.assertEqual(Regex("abc", ""), r)

    def test_two_argument_form(self):
        r = Regex("^acme", "im")
        self.assertEqual("/^acme/im", str(r))
        self.assertEqual(Regex("/^acme/im"), r)

    def test_flags_kept_verbatim(self):
        # Order and unknown characters survive untouched.
        self.assertEqual("mi", Regex("/a/mi").flags)
        self.assertEqual("q", Regex("/a/q").flags)

    def test_exceptions(self):
        self.assertRaises(TypeError, Regex, 5)
        self.assertRaises(TypeError, Regex, "a", 5)
        self.assertRaises(ValueError, Regex, "abc")
        self.assertRaises(ValueError, Regex, "/abc")
        self.assertRaises(ValueError, Regex, "abc/i")

    def test_equality(self):
        self.assertEqual(Regex("/a/i"), Regex("a", "i"))
        self.assertNotEqual(Regex("/a/i"), Regex("a", "m"))
        self.assertNotEqual(Regex("/a/i"), Regex("b", "i"))
        self.assertNotEqual(Regex("/a/i"), "/a/i")
        self.assertFalse(Regex("/a/i") != Regex("a", "i"))

    def test_repr(self):
        self.assertEqual("Regex('^acme', 'i')", repr(Regex("/^acme/i")))

    def test_try_compile(self):
        compiled = Regex("/^ac.me$/is").try_compile()
        self.assertTrue(compiled.match("AC\nME"))
        self.assertEqual(re.IGNORECASE | re.DOTALL, compiled.flags & (re.IGNORECASE | re.DOTALL))

    def test_str_flags_to_int(self):
        self.assertEqual(0, str_flags_to_int(""))
        self.assertEqual(re.IGNORECASE | re.MULTILINE, str_flags_to_int("im"))
        self.assertEqual(re.VERBOSE, str_flags_to_int("x"))

    def test_pickling(self):
        r = Regex("/^acme/i")
        for protocol in [2, -1]:
            self.assertEqual(r, pickle.loads(pickle.dumps(r, protocol=protocol)))

    def test_unhashable(self):
        self.assertRaises(TypeError, hash, Regex("/a/"))


if __name__ == "__main__":
    unittest.main()
