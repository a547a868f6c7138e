from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Iterator, List, Optional, TypeVar

from tidyfolds.core.errors import InvalidParameter

V = TypeVar("V")


@dataclass
class Registry(Generic[V]):
    """Name -> object table used for pluggable pieces such as metrics.

    Names are case-insensitive and stored lowercased. Registering a name twice
    is an error unless ``replace=True``:

        METRICS = Registry[Callable[..., float]](_name="metrics")

        @METRICS.register("rmse")
        def rmse(y_true, y_pred): ...
    """

    _items: Dict[str, V] = field(default_factory=dict)
    _name: str = "registry"

    @staticmethod
    def normalize(key: str) -> str:
        name = str(key).strip().lower()
        if not name:
            raise InvalidParameter("Registry names must be non-empty strings.")
        return name

    def register(self, key: str, *, replace: bool = False) -> Callable[[V], V]:
        name = self.normalize(key)
        if name in self._items and not replace:
            raise InvalidParameter(f"{self._name}: {name!r} is already registered")

        def deco(value: V) -> V:
            self._items[name] = value
            return value

        return deco

    def get(self, key: str) -> V:
        name = self.normalize(key)
        if name not in self._items:
            raise InvalidParameter(f"{self._name}: unknown name {key!r}; registered: {self.names()}")
        return self._items[name]

    def try_get(self, key: str, default: Optional[V] = None) -> Optional[V]:
        return self._items.get(self.normalize(key), default)

    def names(self) -> List[str]:
        return sorted(self._items)

    def __contains__(self, key: str) -> bool:
        return self.normalize(key) in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
