import json
import logging
from typing import Any

log = logging.getLogger('flagengine.util')  # shared logger name for the whole package


def is_number(input: Any) -> bool:
    # bool is a subtype of int, and we don't want to try and treat it as a number.
    return isinstance(input, (int, float)) and not isinstance(input, bool)


def stringify_value(value: Any) -> str:
    """
    Renders a feature value for use in a reasoning trace. Values are opaque to the engine, so
    they are shown in JSON form; anything json can't encode falls back to ``str()``.
    """
    return json.dumps(value, separators=(',', ':'), default=str)


def value_key(value: Any) -> str:
    # Feature values may be unhashable (dicts, lists), so tallies are keyed by a canonical encoding.
    return json.dumps(value, separators=(',', ':'), sort_keys=True, default=str)
