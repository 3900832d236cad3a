from __future__ import annotations
from typing import Optional, Protocol


class SecretStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...
