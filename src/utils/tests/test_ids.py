"""Tests for UUIDv7 user identifiers."""

import time
import unittest
import uuid
from datetime import datetime, timezone

from utils.ids import generate_user_id, get_id_timestamp, is_valid_user_id


class TestGenerateUserId(unittest.TestCase):

    def test_is_version_7(self):
        parsed = uuid.UUID(generate_user_id())
        self.assertEqual(parsed.version, 7)
        self.assertEqual(parsed.variant, uuid.RFC_4122)

    def test_unique(self):
        ids = {generate_user_id() for _ in range(1000)}
        self.assertEqual(len(ids), 1000)

    def test_time_ordered_across_milliseconds(self):
        first = generate_user_id()
        time.sleep(0.002)
        second = generate_user_id()
        self.assertLess(first, second)

    def test_timestamp_round_trip(self):
        before = datetime.now(timezone.utc).replace(microsecond=0)
        ts = get_id_timestamp(generate_user_id())
        self.assertIsNotNone(ts)
        self.assertGreaterEqual(ts, before)


class TestIsValidUserId(unittest.TestCase):

    def test_accepts_generated(self):
        self.assertTrue(is_valid_user_id(generate_user_id()))

    def test_rejects_uuid4(self):
        self.assertFalse(is_valid_user_id(str(uuid.uuid4())))

    def test_rejects_garbage(self):
        self.assertFalse(is_valid_user_id('not-an-id'))
        self.assertFalse(is_valid_user_id(''))
        self.assertIsNone(get_id_timestamp('not-an-id'))


if __name__ == '__main__':
    unittest.main()
