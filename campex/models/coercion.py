"""CAMPEX — Ingestion-time coercion of loosely typed API fields.

ActiveCampaign returns most scalars as strings, but not consistently. These
helpers normalize the fields the filters and the join depend on, once, at
model construction:

- status      → ``int`` or ``None`` (permissive leading-integer parse)
- automation  → :class:`AutomationFlag`
- identifiers → ``str`` or ``None``
"""

import math
import re
from enum import Enum
from typing import Any, Optional

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class AutomationFlag(str, Enum):
    """Normalized ``campaign.automation`` value."""

    ABSENT = "absent"  # Field missing or null
    REGULAR = "regular"  # Literal "0"
    AUTOMATION = "automation"  # Literal "1"
    UNRECOGNIZED = "unrecognized"  # Anything else, numeric 0/1 included


def coerce_status(value: Any) -> Optional[int]:
    """Parse a status code the way a lenient integer parser would.

    ``5`` → 5, ``"5"`` → 5, ``" 5 "`` → 5, ``"5abc"`` → 5, ``5.9`` → 5,
    ``"abc"`` / ``None`` / ``True`` → None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def coerce_automation(value: Any) -> AutomationFlag:
    # Only the exact strings "0" and "1" are recognized.
    if value is None:
        return AutomationFlag.ABSENT
    if isinstance(value, str):
        if value == "0":
            return AutomationFlag.REGULAR
        if value == "1":
            return AutomationFlag.AUTOMATION
    return AutomationFlag.UNRECOGNIZED


def coerce_identifier(value: Any) -> Optional[str]:
    """Normalize an identifier to its string form."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)
