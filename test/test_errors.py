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

"""Test the hmongo and hbson exception hierarchy."""
from __future__ import annotations

import pickle
import sys

sys.path[0:0] = [""]

from test import unittest

from hbson.errors import BSONError, InvalidBSON, InvalidDocument, InvalidId, InvalidStringData
from hmongo.errors import (
    ConfigurationError,
    DriverError,
    MongoError,
    OperationFailure,
    WriteError,
)


class TestErrors(unittest.TestCase):
    def test_hierarchy(self):
        for cls in (InvalidBSON, InvalidDocument, InvalidId, InvalidStringData):
            self.assertTrue(issubclass(cls, BSONError))
        for cls in (ConfigurationError, DriverError, OperationFailure, WriteError):
            self.assertTrue(issubclass(cls, MongoError))
        self.assertTrue(issubclass(WriteError, OperationFailure))

    def test_invalid_document(self):
        doc = {"a": object()}
        exc = InvalidDocument("cannot encode", doc)
        self.assertEqual("cannot encode", str(exc))
        self.assertIs(doc, exc.document)
        self.assertIsNone(InvalidDocument("x").document)

    def test_driver_error(self):
        exc = DriverError("duplicate key", 11000, {"code": 11000})
        self.assertEqual("duplicate key", str(exc))
        self.assertEqual(11000, exc.code)
        self.assertEqual({"code": 11000}, exc.details)

        exc = DriverError("boom")
        self.assertIsNone(exc.code)
        self.assertIsNone(exc.details)

    def test_operation_failure(self):
        exc = OperationFailure("failed", 2, {"ok": 0})
        self.assertEqual("failed, full error: {'ok': 0}", str(exc))
        self.assertEqual(2, exc.code)
        self.assertEqual({"ok": 0}, exc.details)
        self.assertEqual("failed", str(OperationFailure("failed")))

    def test_write_error_from_driver_error(self):
        cause = DriverError("no primary", 10107)
        exc = WriteError._from_driver_error(cause)
        self.assertIsInstance(exc, WriteError)
        self.assertEqual("no primary", str(exc))
        self.assertEqual(10107, exc.code)
        self.assertIsNone(exc.details)

    def test_pickle(self):
        exc = ConfigurationError("bad option")
        loaded = pickle.loads(pickle.dumps(exc))
        self.assertEqual("bad option", str(loaded))
        self.assertIsInstance(loaded, ConfigurationError)


if __name__ == "__main__":
    unittest.main()
