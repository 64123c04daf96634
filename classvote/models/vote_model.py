import re
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

NAME_PATTERN = re.compile(r"[A-Za-z\s]+")
NAME_ERROR = "Name can only contain letters and spaces"


def is_valid_name(name) -> bool:
    """Letters and whitespace only, at least one character."""
    return isinstance(name, str) and NAME_PATTERN.fullmatch(name) is not None


def normalize_name(name: str) -> str:
    return name.lower()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Vote(BaseModel):
    """
    Vote document as stored in the "votes" collection.

    normalizedName is always recomputed from name, whatever the caller sent,
    and carries the unique index that guarantees one vote per voter name.
    """
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    name: str
    voter_class: Optional[str] = Field(default=None, alias="class")
    choice: Optional[str] = None
    normalizedName: Optional[str] = None
    timestamp: datetime = Field(default_factory=_utcnow)

    @field_validator("name")
    @classmethod
    def name_letters_only(cls, v: str) -> str:
        if not is_valid_name(v):
            raise ValueError(NAME_ERROR)
        return v

    @model_validator(mode="after")
    def derive_normalized_name(self) -> "Vote":
        self.normalizedName = normalize_name(self.name)
        return self


class VoteIn(BaseModel):
    """Request body for casting a vote (JSON or form)."""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    name: Optional[str] = Field(default=None, examples=["Alice Smith"])
    voter_class: Optional[str] = Field(default=None, alias="class", examples=["XII IPA 2"])
    choice: Optional[str] = Field(default=None, examples=["665f1c2e9b1e8a3d4c5b6a79"])


class VoteOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    voter_class: Optional[str] = Field(default=None, alias="class")
    choice: Optional[str] = None
    normalizedName: str
    timestamp: datetime


class VoteAck(BaseModel):
    success: bool = True
