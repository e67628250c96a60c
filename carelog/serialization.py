"""JSON output for layouts, week views and summaries."""

import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

import numpy as np


class TimelineEncoder(json.JSONEncoder):
    """
    JSON encoder for engine output.

    RULES:
    1. Dates and datetimes are ISO 8601 strings.
    2. Enums use their .value.
    3. numpy scalars become plain Python numbers.
    4. Contracts with to_dict() use it; other dataclasses use asdict().
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, np.generic):
            return obj.item()
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        if is_dataclass(obj) and not isinstance(obj, type):
            return asdict(obj)
        return super().default(obj)


def to_json(obj: Any, indent: Optional[int] = None) -> str:
    """Serialize with stable key order so identical output is byte-identical."""
    return json.dumps(obj, cls=TimelineEncoder, sort_keys=True, indent=indent)


def to_plain(obj: Any) -> Any:
    """Round-trip through the encoder to get JSON-ready builtins."""
    return json.loads(to_json(obj))
