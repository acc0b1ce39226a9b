"""Objects that receive a solved pixel rectangle, and their column registry."""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from .errors import UnregisteredLocatableError
from .geometry import CanvasLocation

logger = logging.getLogger(__name__)


class Locatable:
    """Anything the layout solver can place.

    Subclasses may predeclare a width or height; the solver then adds one
    dimension equation per declared extent. ``set_location`` is called once per
    solve with the rounded result.
    """

    def fixed_width(self) -> Optional[float]:
        return None

    def fixed_height(self) -> Optional[float]:
        return None

    def set_location(self, location: CanvasLocation) -> None:
        raise NotImplementedError


class IndexedLocatables:
    """Append-only registry assigning each locatable a stable column block.

    Index ``i`` owns the columns ``4*i .. 4*i+3`` (left, bottom, right, top) of
    the layout matrix. Membership is by identity.
    """

    def __init__(self) -> None:
        self._objs: List[Locatable] = []
        self._index: dict[int, int] = {}

    def add(self, locatable: Locatable) -> Optional[int]:
        key = id(locatable)
        if key in self._index:
            logger.debug("Locatable %r already registered at index %d", locatable, self._index[key])
            return None
        self._objs.append(locatable)
        self._index[key] = len(self._objs) - 1
        return self._index[key]

    def __contains__(self, locatable: object) -> bool:
        return id(locatable) in self._index

    def __len__(self) -> int:
        return len(self._objs)

    def __iter__(self) -> Iterator[Locatable]:
        return iter(self._objs)

    def __getitem__(self, index: int) -> Locatable:
        return self._objs[index]

    def index_of(self, locatable: object) -> int:
        try:
            return self._index[id(locatable)]
        except KeyError:
            raise UnregisteredLocatableError(locatable) from None

    def set_location(self, index: int, location: CanvasLocation) -> None:
        if not 0 <= index < len(self._objs):
            raise IndexError(f"locatable index {index} out of range (size {len(self._objs)})")
        self._objs[index].set_location(location)


__all__ = ["IndexedLocatables", "Locatable"]
