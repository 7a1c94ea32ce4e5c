"""
Game variable store exposed to formulas as `v`.
"""

from __future__ import annotations

from typing import Mapping, Optional


class GameVariables:
    """
    Keyed numeric store for external game state.

    Unset variables read as 0, so `v[15]` is always a number.
    """

    def __init__(self, values: Optional[Mapping[int, float]] = None):
        self._data: dict[int, float] = dict(values or {})

    def __getitem__(self, variable_id: int) -> float:
        return self._data.get(variable_id, 0)

    def __setitem__(self, variable_id: int, value: float) -> None:
        self._data[variable_id] = value

    def __contains__(self, variable_id: int) -> bool:
        return variable_id in self._data

    def __len__(self) -> int:
        return len(self._data)

    def clear(self) -> None:
        self._data.clear()
