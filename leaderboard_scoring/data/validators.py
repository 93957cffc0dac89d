# ------------------------------------------------------------------------------------------------
# License
# ------------------------------------------------------------------------------------------------

# Copyright (c) 2025 LSeu-Open
#
# This code is licensed under the MIT License.
# See LICENSE file in the root directory

# ------------------------------------------------------------------------------------------------
# Description
# ------------------------------------------------------------------------------------------------

"""
Data validation utilities for snapshot files.

This module checks the shape of every record in a decoded snapshot document
(required fields, field types, timestamps) and normalises it into keyword
arguments for the record dataclasses. Reference checks between records are not
done here: dangling references are recoverable and are reported by the
snapshot index instead.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..core.constants import REQUIRED_FIELDS
from ..core.exceptions import RecordValidationError

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# Field kinds per section; fields not listed here are ignored
RECORD_FIELDS = {
    'users': {
        'id': 'id', 'display_name': 'str', 'has_affiliation': 'bool',
    },
    'prompts': {
        'id': 'id', 'author_id': 'id', 'created_at': 'datetime', 'type': 'str',
        'prompt_set_id': 'str', 'tags': 'str_list', 'generator_tags': 'str_list',
        'article_tags': 'str_list',
    },
    'feedbacks': {
        'id': 'id', 'reviewer_id': 'id', 'target_prompt_id': 'id', 'opinion': 'str',
        'flags': 'str_list', 'target_response_id': 'str', 'created_at': 'datetime',
    },
    'scores': {
        'id': 'id', 'prompt_id': 'id', 'model_id': 'id', 'value': 'number',
        'response_id': 'str',
    },
    'responses': {
        'id': 'id', 'prompt_id': 'id', 'model_id': 'id', 'started_at': 'datetime',
        'finished_at': 'datetime',
    },
    'benchmarks': {
        'id': 'id', 'owner_id': 'id', 'title': 'str', 'contributor_ids': 'str_list',
    },
    'collaborations': {
        'user_id': 'id', 'prompt_set_id': 'id', 'role': 'str',
    },
}


def to_snake_case(key: str) -> str:
    """Convert a camelCase key to snake_case; snake_case keys are returned unchanged."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an ISO 8601 timestamp (a trailing 'Z' is accepted).

    Naive timestamps are taken to be UTC.

    Raises:
        ValueError: If the value is not a datetime or an ISO 8601 string
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        moment = datetime.fromisoformat(text)
    else:
        raise ValueError(f"expected an ISO 8601 timestamp, got {type(value).__name__}")

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


class SnapshotValidator:
    """Class to handle snapshot record validation"""

    @staticmethod
    def validate_field(section: str, name: str, kind: str, value: Any, position: int) -> Any:
        """
        Validate and normalise a single field of a record.

        Args:
            section (str): Section the record belongs to (e.g. 'prompts')
            name (str): Field name
            kind (str): One of 'id', 'str', 'bool', 'number', 'datetime', 'str_list'
            value (Any): Raw decoded value
            position (int): Index of the record in its section, used in messages

        Returns:
            Any: The normalised value

        Raises:
            RecordValidationError: If the value does not have the expected type
        """
        where = f"{section}[{position}].{name}"

        if value is None:
            if kind == 'id':
                raise RecordValidationError(f"Field '{where}' is required")
            return None

        if kind == 'id':
            if isinstance(value, bool) or not isinstance(value, (str, int)):
                raise RecordValidationError(
                    f"Invalid type for '{where}': expected string id, got {type(value).__name__}"
                )
            value = str(value).strip()
            if not value:
                raise RecordValidationError(f"Field '{where}' cannot be empty")
            return value

        if kind == 'str':
            if isinstance(value, bool) or not isinstance(value, (str, int)):
                raise RecordValidationError(
                    f"Invalid type for '{where}': expected string, got {type(value).__name__}"
                )
            return str(value)

        if kind == 'bool':
            if not isinstance(value, bool):
                raise RecordValidationError(
                    f"Invalid type for '{where}': expected boolean, got {type(value).__name__}"
                )
            return value

        if kind == 'number':
            # Range checks happen in the snapshot index, where they are recoverable
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise RecordValidationError(
                    f"Invalid type for '{where}': expected number, got {type(value).__name__}"
                )
            return float(value)

        if kind == 'datetime':
            try:
                return parse_timestamp(value)
            except ValueError as exc:
                raise RecordValidationError(f"Invalid timestamp for '{where}': {exc}") from exc

        if kind == 'str_list':
            if isinstance(value, str):
                return (value,)
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                raise RecordValidationError(
                    f"Invalid type for '{where}': expected a list of strings"
                )
            return tuple(value)

        raise ValueError(f"Unknown field kind '{kind}'")

    @staticmethod
    def validate_record(section: str, record: Any, position: int) -> Dict[str, Any]:
        """
        Validate one record and return the keyword arguments of its dataclass.

        camelCase keys are accepted and converted to snake_case. Unknown keys
        are dropped.

        Raises:
            RecordValidationError: If the record is not a mapping, misses a
                required field or has a field of the wrong type
        """
        if not isinstance(record, dict):
            raise RecordValidationError(
                f"Record {section}[{position}] must be a mapping, got {type(record).__name__}"
            )

        normalised = {to_snake_case(str(key)): value for key, value in record.items()}
        for field_name in REQUIRED_FIELDS[section]:
            if normalised.get(field_name) is None:
                raise RecordValidationError(
                    f"Missing required field '{field_name}' in {section}[{position}]"
                )

        kinds = RECORD_FIELDS[section]
        ignored = sorted(set(normalised) - set(kinds))
        if ignored:
            logger.debug(f"Ignoring unknown field(s) {ignored} in {section}[{position}]")

        return {
            name: SnapshotValidator.validate_field(section, name, kind, normalised[name], position)
            for name, kind in kinds.items()
            if name in normalised
        }


def validate_snapshot_data(data: Any, source: Optional[str] = None) -> Dict[str, List[Dict[str, Any]]]:
    """
    Validate a decoded snapshot document.

    Args:
        data (Any): The decoded document; must be a mapping of section -> list of records
        source (Optional[str]): Where the document came from, used in messages

    Returns:
        Dict[str, List[Dict[str, Any]]]: Validated keyword arguments per section.
            Missing sections are returned as empty lists.

    Raises:
        RecordValidationError: If any validation check fails
    """
    label = f" in '{source}'" if source else ""
    if not isinstance(data, dict):
        raise RecordValidationError(
            f"Snapshot{label} must be a mapping of sections, got {type(data).__name__}"
        )

    unknown = sorted(set(data) - set(REQUIRED_FIELDS))
    if unknown:
        logger.warning(f"Ignoring unknown snapshot section(s){label}: {', '.join(map(str, unknown))}")

    validator = SnapshotValidator()
    validated: Dict[str, List[Dict[str, Any]]] = {}
    for section in REQUIRED_FIELDS:
        records = data.get(section)
        if records is None:
            validated[section] = []
            continue
        if not isinstance(records, list):
            raise RecordValidationError(
                f"Section '{section}'{label} must be a list, got {type(records).__name__}"
            )
        validated[section] = [
            validator.validate_record(section, record, position)
            for position, record in enumerate(records)
        ]
    return validated


__all__ = [
    "RECORD_FIELDS",
    "to_snake_case",
    "parse_timestamp",
    "SnapshotValidator",
    "validate_snapshot_data",
]
