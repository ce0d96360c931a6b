import json
from typing import Dict, Optional

STORAGE_KEY = "studioSelections"


class SelectionStorage:
    """Key/value store holding one JSON-serialized selection record under a fixed key"""

    key = STORAGE_KEY

    def load(self) -> Optional[Dict[str, str]]:
        raise NotImplementedError

    def save(self, selections: Dict[str, str]) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class InMemorySelectionStorage(SelectionStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = {}
        if initial is not None:
            self._items[self.key] = json.dumps(initial)

    def load(self) -> Optional[Dict[str, str]]:
        raw = self._items.get(self.key)
        if raw is None:
            return None
        return json.loads(raw)

    def save(self, selections: Dict[str, str]) -> None:
        self._items[self.key] = json.dumps(selections)

    def clear(self) -> None:
        self._items.pop(self.key, None)

