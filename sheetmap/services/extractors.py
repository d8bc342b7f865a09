from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace
from typing import Any

from ..errors import ExtractorProtocolError
from ..models.extractor_state import ExtractorState, Message, Position
from ..models.located import Located, realize, unwrap

"""Extractor composition over a loaded (non-mapified) workbook.

An extractor is ``(workbook, state) -> state``. Each extractor must return a
state whose message is ``Message.FOUND``; anything else aborts the chain with
ExtractorProtocolError. Extractors may call other extractors (or
``apply_extractors``) to loop over irregular regions, accumulating results in
``state.data``.
"""

__all__ = [
    "Extractor",
    "read_position",
    "read_value",
    "update_state",
    "apply_extractors",
    "compose_extractors",
]

logger = logging.getLogger(__name__)

Extractor = Callable[[Any, ExtractorState], ExtractorState]


def _nth(items: Sequence[Any], index: int) -> Any:
    if index < 0 or index >= len(items):
        return None
    return items[index]


def read_position(workbook: Any, position: Position) -> Located[Any] | None:
    """Cell at ``position``, or None past the end of the sheet/row/column sequence.

    An existing empty cell is returned as ``Located(None, ...)``. A cell that
    failed to decode raises its stored error.
    """
    sheet = _nth(unwrap(workbook), position.sheet)
    if sheet is None:
        return None
    row = _nth(unwrap(sheet), position.row)
    if row is None:
        return None
    cell = _nth(unwrap(row), position.column)
    if cell is None:
        return None
    realize(cell)
    return cell


def read_value(workbook: Any, position: Position) -> Any:
    """Bare value at ``position``; None both for empty and missing cells."""
    return unwrap(read_position(workbook, position))


def update_state(
    state: ExtractorState,
    position_delta: Mapping[str, int] | None = None,
    message: Any = Message.FOUND,
    data_transform: Callable[[dict[str, Any]], dict[str, Any]] | None = None,
) -> ExtractorState:
    """New state: position fields merged (partial update), message set, data transformed.

    ``data_transform`` receives a copy of the accumulated data.
    """
    position = replace(state.position, **dict(position_delta or {}))
    data = dict(state.data)
    if data_transform is not None:
        data = data_transform(data)
    return ExtractorState(position=position, data=data, message=message)


def _name(extractor: Any) -> str:
    return getattr(extractor, "__name__", None) or repr(extractor)


def apply_extractors(extractors: Sequence[Extractor], workbook: Any, state: ExtractorState) -> ExtractorState:
    """Run extractors left to right, threading the state.

    Raises:
        ExtractorProtocolError: an extractor returned a message other than FOUND;
            carries the extractor and the state it returned.
    """
    for extractor in extractors:
        returned = extractor(workbook, state)
        if not isinstance(returned, ExtractorState) or returned.message is not Message.FOUND:
            message = getattr(returned, "message", None)
            raise ExtractorProtocolError(
                f"extractor {_name(extractor)} returned message {message!r} instead of {Message.FOUND!r}",
                extractor=extractor,
                state=returned,
            )
        logger.debug("extractor %s -> %s", _name(extractor), returned.position)
        state = returned
    return state


def compose_extractors(extractors: Sequence[Extractor]) -> Extractor:
    """A single extractor running ``extractors`` in sequence."""
    chain = tuple(extractors)

    def composed(workbook: Any, state: ExtractorState) -> ExtractorState:
        return apply_extractors(chain, workbook, state)

    composed.__name__ = "composed(" + ", ".join(_name(e) for e in chain) + ")"
    return composed
