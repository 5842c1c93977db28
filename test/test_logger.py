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

"""Test the command log messages emitted by Collection."""
from __future__ import annotations

import datetime
import logging
import os
import sys
from unittest.mock import patch

sys.path[0:0] = [""]

from test import unittest
from test.utils import RecordingDriver

from bson import json_util

from hmongo.collection import Collection
from hmongo.errors import DriverError, WriteError
from hmongo.logger import (
    _DEFAULT_DOCUMENT_LENGTH,
    _DOCUMENT_LENGTH_ENV,
    LogMessage,
    _debug_log,
    _max_document_length,
)


class TestLogger(unittest.TestCase):
    def setUp(self):
        self.driver = RecordingDriver({"ok": 1, "nMatched": 1, "nModified": 1})
        self.coll = Collection(self.driver, "test", "hmongo_test")

    def test_command_started_and_succeeded(self):
        with patch.dict("os.environ"):
            os.environ.pop(_DOCUMENT_LENGTH_ENV, None)
            with self.assertLogs("hmongo.command", level="DEBUG") as cm:
                self.coll.insert({"_id": 1, "x": "y"})

        self.assertEqual(2, len(cm.records))
        started = json_util.loads(cm.records[0].getMessage())
        self.assertEqual("Command started", started["message"])
        self.assertEqual("insert", started["commandName"])
        self.assertEqual("hmongo_test", started["databaseName"])
        self.assertEqual("test", started["collectionName"])
        self.assertEqual(
            {"insert": "test", "documents": [{"_id": 1, "x": "y"}]},
            json_util.loads(started["command"]),
        )

        succeeded = json_util.loads(cm.records[1].getMessage())
        self.assertEqual("Command succeeded", succeeded["message"])
        self.assertEqual("insert", succeeded["commandName"])
        self.assertIsInstance(succeeded["durationMS"], float)
        self.assertEqual({"ok": 1}, json_util.loads(succeeded["reply"]))

    def test_update_reply_logged(self):
        with self.assertLogs("hmongo.command", level="DEBUG") as cm:
            self.coll.update({"x": 1}, {"$set": {"x": 2}}, {"upsert": True})

        started = json_util.loads(cm.records[0].getMessage())
        command = json_util.loads(started["command"])
        self.assertEqual("update", started["commandName"])
        self.assertTrue(command["upsert"])
        self.assertFalse(command["multi"])
        self.assertEqual("Command succeeded", json_util.loads(cm.records[1].getMessage())["message"])

    def test_remove_logged(self):
        with self.assertLogs("hmongo.command", level="DEBUG") as cm:
            self.coll.remove({"x": 1}, {"justOne": True})

        command = json_util.loads(json_util.loads(cm.records[0].getMessage())["command"])
        self.assertEqual({"delete": "test", "q": {"x": 1}, "limit": 1}, command)

    def test_command_failed(self):
        self.driver.error = DriverError("duplicate key", 11000, {"code": 11000, "errmsg": "dup"})
        with self.assertLogs("hmongo.command", level="DEBUG") as cm:
            with self.assertRaises(WriteError):
                self.coll.insert({"_id": 1})

        failed = json_util.loads(cm.records[-1].getMessage())
        self.assertEqual("Command failed", failed["message"])
        self.assertEqual({"code": 11000, "errmsg": "dup"}, json_util.loads(failed["failure"]))

    def test_command_failed_without_details(self):
        self.driver.error = DriverError("boom")
        with self.assertLogs("hmongo.command", level="DEBUG") as cm:
            with self.assertRaises(WriteError):
                self.coll.remove()

        failed = json_util.loads(cm.records[-1].getMessage())
        self.assertEqual({"errmsg": "boom"}, json_util.loads(failed["failure"]))

    def test_configured_truncation_limit(self):
        with patch.dict("os.environ", {_DOCUMENT_LENGTH_ENV: "5"}):
            with self.assertLogs("hmongo.command", level="DEBUG") as cm:
                self.coll.insert({"x": "y" * 50})

            cmd_started_log = json_util.loads(cm.records[0].getMessage())
            self.assertEqual(5 + 3, len(cmd_started_log["command"]))
            self.assertTrue(cmd_started_log["command"].endswith("..."))

            cmd_succeeded_log = json_util.loads(cm.records[1].getMessage())
            self.assertLessEqual(len(cmd_succeeded_log["reply"]), 5 + 3)

    def test_default_truncation_limit(self):
        docs = [{"x": "y"} for _ in range(100)]
        with patch.dict("os.environ"):
            os.environ.pop(_DOCUMENT_LENGTH_ENV, None)
            with self.assertLogs("hmongo.command", level="DEBUG") as cm:
                self.coll.insert({"docs": docs})

        cmd_started_log = json_util.loads(cm.records[0].getMessage())
        self.assertEqual(_DEFAULT_DOCUMENT_LENGTH + 3, len(cmd_started_log["command"]))

    def test_max_document_length(self):
        with patch.dict("os.environ", {_DOCUMENT_LENGTH_ENV: "20"}):
            self.assertEqual(20, _max_document_length())
        with patch.dict("os.environ", {_DOCUMENT_LENGTH_ENV: "lots"}):
            self.assertEqual(_DEFAULT_DOCUMENT_LENGTH, _max_document_length())
        with patch.dict("os.environ", {_DOCUMENT_LENGTH_ENV: "-1"}):
            self.assertEqual(_DEFAULT_DOCUMENT_LENGTH, _max_document_length())
        with patch.dict("os.environ"):
            os.environ.pop(_DOCUMENT_LENGTH_ENV, None)
            self.assertEqual(_DEFAULT_DOCUMENT_LENGTH, _max_document_length())

    def test_log_message(self):
        message = LogMessage(
            message="Command succeeded",
            durationMS=datetime.timedelta(milliseconds=12),
            reply={"ok": 1},
        )
        rendered = json_util.loads(str(message))
        self.assertAlmostEqual(12.0, rendered["durationMS"])
        self.assertEqual({"ok": 1}, json_util.loads(rendered["reply"]))

    def test_unserializable_values_use_repr(self):
        class Opaque:
            def __repr__(self):
                return "Opaque()"

        rendered = json_util.loads(str(LogMessage(command={"a": Opaque()})))
        self.assertIn("Opaque()", rendered["command"])

    def test_nothing_logged_above_debug(self):
        logger = logging.getLogger("hmongo.test.quiet")
        logger.setLevel(logging.INFO)
        with patch.object(logger, "debug") as debug:
            _debug_log(logger, message="Command started")
        debug.assert_not_called()


if __name__ == "__main__":
    unittest.main()
