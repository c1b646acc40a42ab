import copy
from typing import Any

from rooflet.domain.ports import PreferenceStore


class InMemoryPreferenceStore(PreferenceStore):
    def __init__(self) -> None:
        self._items: dict[tuple[str, str], Any] = {}

    def get(self, portfolio_id: str, key: str) -> Any | None:
        value = self._items.get((portfolio_id, key))
        return copy.deepcopy(value)

    def set(self, portfolio_id: str, key: str, value: Any) -> None:
        self._items[(portfolio_id, key)] = copy.deepcopy(value)

    def clear(self, portfolio_id: str, key: str | None = None) -> None:
        if key is not None:
            self._items.pop((portfolio_id, key), None)
            return
        for k in [k for k in self._items if k[0] == portfolio_id]:
            del self._items[k]

    def all(self) -> dict[tuple[str, str], Any]:
        return dict(self._items)
