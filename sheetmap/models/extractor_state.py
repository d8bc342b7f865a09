from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""ExtractorState: position + accumulated data + success signal.

States are threaded by value through an extractor chain; every step returns a
new state (see services.extractors.update_state).
"""

__all__ = [
    "Message",
    "Position",
    "ExtractorState",
]


class Message(Enum):
    UNSET = "unset"
    FOUND = "found"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Position:
    sheet: int = 0
    row: int = 0
    column: int = 0


@dataclass(frozen=True)
class ExtractorState:
    position: Position = field(default_factory=Position)
    data: dict[str, Any] = field(default_factory=dict)
    message: Any = Message.UNSET  # must be Message.FOUND after each extractor
