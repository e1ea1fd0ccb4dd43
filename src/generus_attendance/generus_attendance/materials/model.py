from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Material:
    """Learning material published by a coordinator.

    ``file_url`` is only a reference; storing the file is somebody else's job.
    """

    material_id: int
    title: str
    coordinator_id: int
    description: Optional[str] = None
    content: Optional[str] = None
    link_url: Optional[str] = None
    file_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    coordinator_name: Optional[str] = None


MATERIAL_FIELDS = ("title", "description", "content", "link_url", "file_url")
