import unittest
from datetime import datetime, timedelta, timezone

from shared.dates import coerce_datetime, day_window, format_timestamp, is_start_of_day
from shared.json_utils import convert_keys
from shared.puzzle_doc import (
    InvalidPuzzleDocumentError,
    PuzzleDocument,
    decode_puzzle_document,
)

STORED = {
    "puzzleNumber": 3,
    "date": datetime(2025, 4, 21, tzinfo=timezone.utc),
    "difficulty": "normal",
    "emojis": ["🏡", "🧹"],
    "answer": "Housekeeping",
    "hints": ["a", "b"],
}


class DecodePuzzleDocumentTests(unittest.TestCase):
    def test_defaults_optional_fields(self):
        doc = decode_puzzle_document("p1", STORED)
        self.assertEqual(doc.id, "p1")
        self.assertEqual(doc.puzzle_number, 3)
        self.assertEqual(doc.emojis, ["🏡", "🧹"])
        self.assertFalse(doc.is_fusion_twist)
        self.assertIsNone(doc.twist_type)

    def test_null_and_empty_optional_fields_take_defaults(self):
        data = dict(STORED, hints=None, isFusionTwist=None, twistType="")
        doc = decode_puzzle_document("p1", data)
        self.assertEqual(doc.hints, [])
        self.assertFalse(doc.is_fusion_twist)
        self.assertIsNone(doc.twist_type)

    def test_twist_fields(self):
        doc = decode_puzzle_document(
            "p1", dict(STORED, isFusionTwist=True, twistType="triple")
        )
        self.assertTrue(doc.is_fusion_twist)
        self.assertEqual(doc.twist_type, "triple")

    def test_integer_twist_flag_from_legacy_rows(self):
        doc = decode_puzzle_document("p1", dict(STORED, isFusionTwist=1))
        self.assertIs(doc.is_fusion_twist, True)

    def test_string_dates_become_utc_midnight(self):
        doc = decode_puzzle_document("p1", dict(STORED, date="2025-04-21"))
        self.assertEqual(doc.date, datetime(2025, 4, 21, tzinfo=timezone.utc))

    def test_missing_required_field_is_rejected(self):
        data = dict(STORED)
        del data["answer"]
        with self.assertRaises(InvalidPuzzleDocumentError):
            decode_puzzle_document("p1", data)

    def test_wrong_type_is_rejected(self):
        with self.assertRaises(InvalidPuzzleDocumentError):
            decode_puzzle_document("p1", dict(STORED, emojis="🏡🧹"))
        with self.assertRaises(InvalidPuzzleDocumentError):
            decode_puzzle_document("p1", dict(STORED, date="next tuesday"))

    def test_non_positive_puzzle_number_is_rejected(self):
        with self.assertRaises(InvalidPuzzleDocumentError):
            decode_puzzle_document("p1", dict(STORED, puzzleNumber=0))

    def test_missing_id_is_rejected(self):
        with self.assertRaises(InvalidPuzzleDocumentError):
            decode_puzzle_document("", STORED)

    def test_extra_keys_are_ignored(self):
        doc = decode_puzzle_document("p1", dict(STORED, theme="home"))
        self.assertEqual(doc.answer, "Housekeeping")


class PuzzleDocumentViewTests(unittest.TestCase):
    def setUp(self):
        self.doc = decode_puzzle_document("p1", STORED)

    def test_public_view_withholds_answer_and_hints(self):
        view = self.doc.public_view()
        self.assertEqual(view.date, "2025-04-21T00:00:00.000Z")
        self.assertFalse(hasattr(view, "answer"))
        self.assertFalse(hasattr(view, "hints"))

    def test_archive_view_reveals_answer_only(self):
        view = self.doc.archive_view()
        self.assertEqual(view.answer, "Housekeeping")
        self.assertFalse(hasattr(view, "hints"))

    def test_hint_at(self):
        self.assertEqual(self.doc.hint_at(1), "b")
        self.assertIsNone(self.doc.hint_at(2))
        self.assertIsNone(self.doc.hint_at(-1))

    def test_empty_hint_is_not_served(self):
        doc = decode_puzzle_document("p1", dict(STORED, hints=["a", ""]))
        self.assertIsNone(doc.hint_at(1))

    def test_to_store_dict_is_camel_case_without_id(self):
        data = self.doc.to_store_dict()
        self.assertNotIn("id", data)
        self.assertEqual(data["puzzleNumber"], 3)
        self.assertIs(data["isFusionTwist"], False)
        self.assertEqual(decode_puzzle_document("p1", data), self.doc)

    def test_at_start_of_day(self):
        doc = self.doc.with_date(datetime(2025, 4, 21, 4, tzinfo=timezone.utc))
        self.assertEqual(
            doc.at_start_of_day().date, datetime(2025, 4, 21, tzinfo=timezone.utc)
        )
        self.assertIsInstance(doc, PuzzleDocument)


class DateHelperTests(unittest.TestCase):
    def test_day_window_is_half_open_utc_day(self):
        now = datetime(2025, 4, 21, 23, 59, tzinfo=timezone.utc)
        start, end = day_window(now)
        self.assertEqual(start, datetime(2025, 4, 21, tzinfo=timezone.utc))
        self.assertEqual(end - start, timedelta(days=1))

    def test_day_window_converts_other_offsets(self):
        eastern = timezone(timedelta(hours=-5))
        start, _ = day_window(datetime(2025, 4, 21, 22, 0, tzinfo=eastern))
        self.assertEqual(start, datetime(2025, 4, 22, tzinfo=timezone.utc))

    def test_coerce_datetime(self):
        expected = datetime(2025, 4, 21, tzinfo=timezone.utc)
        self.assertEqual(coerce_datetime("2025-04-21T00:00:00.000Z"), expected)
        self.assertEqual(coerce_datetime(datetime(2025, 4, 21)), expected)
        self.assertEqual(coerce_datetime("garbage"), "garbage")

    def test_format_timestamp_has_milliseconds(self):
        value = datetime(2025, 4, 21, 4, 5, 6, 789000, tzinfo=timezone.utc)
        self.assertEqual(format_timestamp(value), "2025-04-21T04:05:06.789Z")

    def test_is_start_of_day(self):
        self.assertTrue(is_start_of_day(datetime(2025, 4, 21, tzinfo=timezone.utc)))
        self.assertFalse(
            is_start_of_day(datetime(2025, 4, 21, 4, tzinfo=timezone.utc))
        )


class ConvertKeysTests(unittest.TestCase):
    def test_round_trip(self):
        data = {"puzzleNumber": 1, "nested": [{"twistType": None}]}
        snake = convert_keys(data, "camel_to_snake")
        self.assertEqual(snake, {"puzzle_number": 1, "nested": [{"twist_type": None}]})
        self.assertEqual(convert_keys(snake, "snake_to_camel"), data)

    def test_unknown_direction(self):
        with self.assertRaises(ValueError):
            convert_keys({}, "upside_down")


if __name__ == "__main__":
    unittest.main()
