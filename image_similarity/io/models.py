"""Data models shared across the duplicate grouping pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import imagehash


@dataclass(slots=True)
class ImageSignature:
    """Perceptual signature computed for one image source."""

    source: str
    signature: imagehash.ImageHash
    width: int = 0
    height: int = 0
    codec: str | None = None


@dataclass(slots=True)
class DuplicateGroup:
    """Images whose signatures are linked by at least one duplicate edge."""

    group_id: str
    members: List[str]


@dataclass(slots=True)
class GroupReport:
    """Summary metrics for a grouping run."""

    total: int
    hashed: int
    coverage: float
    pairs: int
    groups: int
    largest_group: int
    threshold: int
