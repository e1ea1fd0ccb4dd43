from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Material


class MaterialRepository(Protocol):
    def create(self, *, coordinator_id: int, fields: Mapping[str, Any]) -> int:
        raise NotImplementedError

    def get_by_id(self, material_id: int) -> Optional[Material]:
        raise NotImplementedError

    def update_fields(self, material_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, material_id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Material]:
        raise NotImplementedError

    def list_by_coordinator(self, coordinator_id: int) -> Sequence[Material]:
        raise NotImplementedError
