from __future__ import annotations

from typing import Any, Optional, Protocol


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[Any]: ...
    def set(self, key: str, value: Any) -> None: ...
    def delete(self, key: str) -> None: ...
