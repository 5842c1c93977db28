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

"""Run the unit tests for WriteConcern."""
from __future__ import annotations

import collections
import sys

sys.path[0:0] = [""]

from test import unittest

from hmongo.errors import ConfigurationError
from hmongo.write_concern import DEFAULT_WRITE_CONCERN, WriteConcern


class TestWriteConcern(unittest.TestCase):
    def test_invalid(self):
        # Can't use fsync and j options together
        self.assertRaises(ConfigurationError, WriteConcern, j=True, fsync=True)
        # Can't use w=0 and j options together
        self.assertRaises(ConfigurationError, WriteConcern, w=0, j=True)
        self.assertRaises(ConfigurationError, WriteConcern, w=-1)
        self.assertRaises(ConfigurationError, WriteConcern, wtimeout=-1)

    def test_invalid_types(self):
        self.assertRaises(TypeError, WriteConcern, w=1.5)
        self.assertRaises(TypeError, WriteConcern, w=True)
        self.assertRaises(TypeError, WriteConcern, w=[1])
        self.assertRaises(TypeError, WriteConcern, wtimeout="100")
        self.assertRaises(TypeError, WriteConcern, wtimeout=1.5)
        self.assertRaises(TypeError, WriteConcern, wtimeout=True)
        self.assertRaises(TypeError, WriteConcern, j=1)
        self.assertRaises(TypeError, WriteConcern, fsync="true")

    def test_document(self):
        concern = WriteConcern(w="majority", wtimeout=100, j=True)
        self.assertEqual({"w": "majority", "wtimeout": 100, "j": True}, concern.document)
        self.assertEqual({"fsync": False}, WriteConcern(fsync=False).document)
        self.assertEqual({"j": True, "fsync": False}, WriteConcern(j=True, fsync=False).document)
        self.assertEqual({}, WriteConcern().document)

    def test_document_is_a_copy(self):
        concern = WriteConcern(w=2)
        doc = concern.document
        doc["w"] = 5
        self.assertEqual({"w": 2}, concern.document)

    def test_acknowledged(self):
        self.assertTrue(WriteConcern().acknowledged)
        self.assertTrue(WriteConcern(w=1).acknowledged)
        self.assertTrue(WriteConcern(w="majority").acknowledged)
        self.assertFalse(WriteConcern(w=0).acknowledged)
        self.assertFalse(WriteConcern(w=0, fsync=True).acknowledged)

    def test_server_default(self):
        self.assertTrue(WriteConcern().is_server_default)
        self.assertTrue(DEFAULT_WRITE_CONCERN.is_server_default)
        self.assertFalse(WriteConcern(w=1).is_server_default)
        self.assertFalse(WriteConcern(j=False).is_server_default)

    def test_repr(self):
        self.assertEqual("WriteConcern()", repr(WriteConcern()))
        self.assertEqual("WriteConcern(wtimeout=10, w=2)", repr(WriteConcern(w=2, wtimeout=10)))

    def test_equality(self):
        concern = WriteConcern(j=True, wtimeout=3000)
        self.assertEqual(concern, WriteConcern(j=True, wtimeout=3000))
        self.assertNotEqual(concern, WriteConcern())
        self.assertEqual(hash(concern), hash(WriteConcern(wtimeout=3000, j=True)))

    def test_equality_to_none(self):
        concern = WriteConcern()
        self.assertNotEqual(concern, None)
        # Explicitly use the != operator.
        self.assertTrue(concern != None)  # noqa

    def test_equality_compatible_type(self):
        class _FakeWriteConcern:
            def __init__(self, **document):
                self.document = document

            def __eq__(self, other):
                try:
                    return self.document == other.document
                except AttributeError:
                    return NotImplemented

            def __ne__(self, other):
                try:
                    return self.document != other.document
                except AttributeError:
                    return NotImplemented

        self.assertEqual(WriteConcern(j=True), _FakeWriteConcern(j=True))
        self.assertEqual(_FakeWriteConcern(j=True), WriteConcern(j=True))
        self.assertEqual(WriteConcern(wtimeout=42), _FakeWriteConcern(wtimeout=42))
        self.assertNotEqual(WriteConcern(wtimeout=42), _FakeWriteConcern(wtimeout=2000))

    def test_equality_incompatible_type(self):
        _fake_type = collections.namedtuple("NotAWriteConcern", ["document"])  # type: ignore
        self.assertNotEqual(WriteConcern(j=True), _fake_type({"j": True}))


if __name__ == "__main__":
    unittest.main()
