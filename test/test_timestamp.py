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

"""Tests for the Timestamp class."""
from __future__ import annotations

import copy
import datetime
import pickle
import sys

sys.path[0:0] = [""]

from test import unittest

from hbson.timestamp import Timestamp


class TestTimestamp(unittest.TestCase):
    def test_timestamp(self):
        t = Timestamp(123, 456)
        self.assertEqual(t.time, 123)
        self.assertEqual(t.inc, 456)
        self.assertTrue(isinstance(t, Timestamp))

    def test_zero_default(self):
        t = Timestamp()
        self.assertEqual(0, t.time)
        self.assertEqual(0, t.inc)
        self.assertEqual(Timestamp(0, 0), t)

    def test_as_datetime(self):
        d = datetime.datetime(2010, 5, 5, tzinfo=datetime.timezone.utc)
        t = Timestamp(1273017600, 0)
        self.assertEqual(d, t.as_datetime())

    def test_copy_pickle(self):
        t = Timestamp(1273017600, 7)
        self.assertEqual(t, copy.deepcopy(t))
        for protocol in [2, -1]:
            pkl = pickle.dumps(t, protocol=protocol)
            self.assertEqual(t, pickle.loads(pkl))

    def test_exceptions(self):
        self.assertRaises(TypeError, Timestamp, None, 123)
        self.assertRaises(TypeError, Timestamp, 1.2, 123)
        self.assertRaises(TypeError, Timestamp, 123, None)
        self.assertRaises(TypeError, Timestamp, 123, 1.2)
        self.assertRaises(ValueError, Timestamp, 0, -1)
        self.assertRaises(ValueError, Timestamp, -1, 0)
        self.assertRaises(ValueError, Timestamp, 2**32, 0)
        self.assertRaises(ValueError, Timestamp, 0, 2**32)
        self.assertTrue(Timestamp(2**32 - 1, 2**32 - 1))

    def test_equality(self):
        t = Timestamp(1, 1)
        self.assertNotEqual(t, Timestamp(0, 1))
        self.assertNotEqual(t, Timestamp(1, 0))
        self.assertEqual(t, Timestamp(1, 1))
        self.assertNotEqual(t, (1, 1))

        # Explicitly test inequality
        self.assertFalse(t != Timestamp(1, 1))

    def test_ordering(self):
        self.assertLess(Timestamp(1, 9), Timestamp(2, 0))
        self.assertLess(Timestamp(1, 1), Timestamp(1, 2))
        self.assertGreaterEqual(Timestamp(1, 1), Timestamp(1, 1))

    def test_hash(self):
        self.assertEqual(hash(Timestamp(1, 2)), hash(Timestamp(1, 2)))
        self.assertEqual(1, len({Timestamp(1, 2), Timestamp(1, 2)}))

    def test_repr(self):
        t = Timestamp(0, 0)
        self.assertEqual(repr(t), "Timestamp(0, 0)")
        self.assertEqual(repr(Timestamp(5, 6)), "Timestamp(5, 6)")


if __name__ == "__main__":
    unittest.main()
