from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common.validators import optional_text, require_non_empty
from ..core.exceptions import NotFoundError
from ..core.result import as_result
from ..teachers.repository import CoordinatorRepository
from .model import MATERIAL_FIELDS, Material
from .repository import MaterialRepository


def _clean(data: Mapping[str, Any], *, partial: bool) -> dict:
    out: dict = {}
    for field in MATERIAL_FIELDS:
        if field not in data:
            continue
        if field == "title":
            out[field] = require_non_empty(data[field], "Title")
        else:
            out[field] = optional_text(data[field])
    if not partial and "title" not in out:
        out["title"] = require_non_empty(None, "Title")
    return out


class MaterialService:
    def __init__(self, materials: MaterialRepository, coordinators: CoordinatorRepository):
        self._materials = materials
        self._coordinators = coordinators

    @as_result("Material published")
    def create(self, coordinator_id: int, data: Mapping[str, Any]) -> Material:
        fields = _clean(data, partial=False)
        if not self._coordinators.get_by_id(int(coordinator_id)):
            raise NotFoundError("Coordinator not found")
        material_id = self._materials.create(coordinator_id=int(coordinator_id), fields=fields)
        return self._materials.get_by_id(material_id)

    @as_result("Material updated")
    def update(self, material_id: int, data: Mapping[str, Any]) -> Material:
        if not self._materials.get_by_id(int(material_id)):
            raise NotFoundError("Material not found")
        fields = _clean(data, partial=True)
        if fields:
            self._materials.update_fields(int(material_id), fields)
        return self._materials.get_by_id(int(material_id))

    @as_result("Material deleted")
    def delete(self, material_id: int) -> None:
        if not self._materials.delete(int(material_id)):
            raise NotFoundError("Material not found")

    def get(self, material_id: int) -> Optional[Material]:
        return self._materials.get_by_id(int(material_id))

    def list_all(self) -> Sequence[Material]:
        return self._materials.list_all()

    def list_by_coordinator(self, coordinator_id: int) -> Sequence[Material]:
        return self._materials.list_by_coordinator(int(coordinator_id))
