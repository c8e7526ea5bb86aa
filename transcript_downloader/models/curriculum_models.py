"""Pydantic models for raw items returned by the curriculum listing API."""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CurriculumKind(str, Enum):
    CHAPTER = "chapter"
    LECTURE = "lecture"
    QUIZ = "quiz"
    PRACTICE = "practice"
    OTHER = "other"


class CaptionTrack(BaseModel):
    """A caption file attached to a lecture asset."""

    model_config = ConfigDict(frozen=True)

    url: str = ""
    locale_id: Optional[str] = None

    @field_validator("url", mode="before")
    @classmethod
    def _url_or_empty(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("locale_id", mode="before")
    @classmethod
    def _locale_or_none(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) and value else None


class CurriculumAsset(BaseModel):
    """Media asset of a lecture item."""

    model_config = ConfigDict(frozen=True)

    asset_type: Optional[str] = None
    time_estimation: Optional[int] = None
    captions: List[CaptionTrack] = Field(default_factory=list)

    @field_validator("asset_type", mode="before")
    @classmethod
    def _type_or_none(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None

    @field_validator("time_estimation", mode="before")
    @classmethod
    def _seconds_or_none(cls, value: Any) -> Optional[int]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return int(value)

    @field_validator("captions", mode="before")
    @classmethod
    def _caption_list(cls, value: Any) -> List[Any]:
        if not isinstance(value, list):
            return []
        return [entry for entry in value if isinstance(entry, dict)]

    @property
    def is_video(self) -> bool:
        # Compound values such as "PremiumVideo" count as video too.
        return isinstance(self.asset_type, str) and "video" in self.asset_type.lower()


class CurriculumItem(BaseModel):
    """One entry of the subscriber curriculum listing."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: str = Field(default="", alias="_class")
    id: Union[int, str]
    title: str = ""
    sort_order: int = 0
    created: Optional[str] = None
    asset: Optional[CurriculumAsset] = None

    @field_validator("kind", "title", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("sort_order", mode="before")
    @classmethod
    def _order_or_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("created", mode="before")
    @classmethod
    def _created_or_none(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None

    @field_validator("asset", mode="before")
    @classmethod
    def _asset_or_none(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None

    @property
    def item_type(self) -> CurriculumKind:
        try:
            return CurriculumKind(self.kind)
        except ValueError:
            return CurriculumKind.OTHER
