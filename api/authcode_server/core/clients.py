from typing import Iterable, Optional


class ClientRegistry:
    """Fixed allow-list of client ids permitted to request authorization codes"""

    def __init__(self, client_ids: Iterable[str]):
        self._client_ids = frozenset(c for c in client_ids if c)

    def __len__(self) -> int:
        return len(self._client_ids)

    def __contains__(self, client_id) -> bool:
        return self.is_allowed(client_id)

    def is_allowed(self, client_id: Optional[str]) -> bool:
        return bool(client_id) and client_id in self._client_ids
