#!/usr/bin/env python
"""
Pydantic DTOs for the upstream album/photo API payloads.

The API uses camelCase keys (``albumId``, ``thumbnailUrl``); the models expose
snake_case attributes and accept either spelling. Unknown keys are ignored.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Identifier = Union[int, str]


class Album(BaseModel):
    """A named collection of photos."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    id: Identifier
    title: str
    user_id: Optional[Identifier] = Field(default=None, alias="userId")


class Photo(BaseModel):
    """Photo metadata as listed for one album."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    id: Identifier
    url: str
    album_id: Optional[Identifier] = Field(default=None, alias="albumId")
    title: Optional[str] = None
    thumbnail_url: Optional[str] = Field(default=None, alias="thumbnailUrl")

    def to_record(self) -> Dict[str, Any]:
        """Serialize using the API's own key names, skipping unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


def albums_from_payload(payload: Iterable[Dict[str, Any]]) -> List[Album]:
    return [Album.model_validate(item) for item in payload]


def photos_from_payload(payload: Iterable[Dict[str, Any]]) -> List[Photo]:
    return [Photo.model_validate(item) for item in payload]


__all__ = ["Album", "Photo", "Identifier", "albums_from_payload", "photos_from_payload"]
