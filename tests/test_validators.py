"""Tests for the snapshot validators."""

import unittest
from datetime import datetime, timedelta, timezone

from leaderboard_scoring.core.exceptions import RecordValidationError
from leaderboard_scoring.data.validators import (
    SnapshotValidator,
    parse_timestamp,
    to_snake_case,
    validate_snapshot_data,
)


class TestKeyAndTimestampHelpers(unittest.TestCase):
    """Test case for key conversion and timestamp parsing."""

    def test_camel_case_keys_are_converted(self):
        self.assertEqual(to_snake_case("authorId"), "author_id")
        self.assertEqual(to_snake_case("targetPromptId"), "target_prompt_id")
        self.assertEqual(to_snake_case("author_id"), "author_id")

    def test_zulu_suffix_is_utc(self):
        moment = parse_timestamp("2025-01-02T03:04:05Z")
        self.assertEqual(moment, datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc))

    def test_naive_timestamp_is_taken_as_utc(self):
        self.assertEqual(parse_timestamp("2025-01-02T03:04:05").tzinfo, timezone.utc)
        self.assertEqual(parse_timestamp(datetime(2025, 1, 2)).tzinfo, timezone.utc)

    def test_offsets_are_kept(self):
        moment = parse_timestamp("2025-01-02T03:04:05+02:00")
        self.assertEqual(moment.utcoffset(), timedelta(hours=2))

    def test_bad_timestamps_raise(self):
        with self.assertRaises(ValueError):
            parse_timestamp("yesterday")
        with self.assertRaises(ValueError):
            parse_timestamp(1700000000)


class TestSnapshotValidator(unittest.TestCase):
    """Test case for the SnapshotValidator class."""

    def setUp(self):
        """Set up test fixtures."""
        self.validator = SnapshotValidator()

    def test_validate_record_valid(self):
        """Test that a well-formed prompt passes and is normalised."""
        record = {
            'id': 'p1',
            'authorId': 'alice',
            'createdAt': '2025-03-01T00:00:00Z',
            'tags': 'math',
            'promptSetId': 'set-1',
        }

        result = self.validator.validate_record('prompts', record, 0)

        self.assertEqual(result['author_id'], 'alice')
        self.assertEqual(result['tags'], ('math',))
        self.assertEqual(result['prompt_set_id'], 'set-1')
        self.assertEqual(result['created_at'].tzinfo, timezone.utc)

    def test_unknown_fields_are_dropped(self):
        result = self.validator.validate_record('users', {'id': 'u1', 'email': 'x@example.com'}, 0)
        self.assertEqual(result, {'id': 'u1'})

    def test_integer_ids_become_strings(self):
        result = self.validator.validate_record('scores', {'id': 7, 'promptId': 1, 'modelId': 'm'}, 0)
        self.assertEqual(result['id'], '7')
        self.assertEqual(result['prompt_id'], '1')

    def test_missing_required_field(self):
        """Test that a feedback without an opinion fails validation."""
        with self.assertRaises(RecordValidationError):
            self.validator.validate_record(
                'feedbacks', {'id': 'f1', 'reviewerId': 'bob', 'targetPromptId': 'p1'}, 0
            )

    def test_invalid_field_types(self):
        invalid = [
            ('users', {'id': 'u1', 'hasAffiliation': 'yes'}),
            ('scores', {'id': 's1', 'promptId': 'p1', 'modelId': 'm', 'value': 'high'}),
            ('scores', {'id': 's1', 'promptId': 'p1', 'modelId': 'm', 'value': True}),
            ('prompts', {'id': 'p1', 'authorId': 'a', 'tags': ['ok', 3]}),
            ('prompts', {'id': 'p1', 'authorId': 'a', 'createdAt': 'not a date'}),
            ('prompts', {'id': ' ', 'authorId': 'a'}),
        ]
        for section, record in invalid:
            with self.subTest(section=section, record=record):
                with self.assertRaises(RecordValidationError):
                    self.validator.validate_record(section, record, 0)

    def test_record_must_be_a_mapping(self):
        with self.assertRaises(RecordValidationError):
            self.validator.validate_record('users', ['u1'], 0)

    def test_out_of_range_score_is_left_to_the_index(self):
        result = self.validator.validate_record(
            'scores', {'id': 's1', 'promptId': 'p1', 'modelId': 'm', 'value': 4}, 0
        )
        self.assertEqual(result['value'], 4.0)


class TestValidateSnapshotData(unittest.TestCase):
    def test_missing_sections_are_empty(self):
        validated = validate_snapshot_data({'users': [{'id': 'u1'}]})
        self.assertEqual(validated['users'], [{'id': 'u1'}])
        self.assertEqual(validated['collaborations'], [])

    def test_unknown_sections_are_ignored(self):
        with self.assertLogs('leaderboard_scoring.data.validators', level='WARNING'):
            validated = validate_snapshot_data({'users': [], 'comments': []}, 'snap.json')
        self.assertNotIn('comments', validated)

    def test_section_must_be_a_list(self):
        with self.assertRaises(RecordValidationError):
            validate_snapshot_data({'users': {'id': 'u1'}})

    def test_document_must_be_a_mapping(self):
        with self.assertRaises(RecordValidationError):
            validate_snapshot_data([{'id': 'u1'}])


if __name__ == '__main__':
    unittest.main()
