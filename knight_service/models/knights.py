# knight_service/models/knights.py

from datetime import datetime, timezone
from typing import List, Union

from pydantic import (
    BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr, field_validator
)

from knight_service.config import get_settings

# numeric strings are rejected, not converted
Number = Union[StrictInt, StrictFloat]


class Weapon(BaseModel):
    name: StrictStr
    mod: Number
    attr: StrictStr
    equipped: StrictBool


class Attributes(BaseModel):
    strength: Number
    dexterity: Number
    constitution: Number
    intelligence: Number
    wisdom: Number
    charisma: Number


def _check_length(value: str, label: str, max_length: int) -> str:
    if len(value) < 1:
        raise ValueError(f"{label} cannot be empty")
    if len(value) > max_length:
        raise ValueError(f"{label} too long (max {max_length} characters)")
    return value


def _as_utc(value: datetime) -> datetime:
    # naive values are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class KnightCreate(BaseModel):
    """Body of ``POST /knights``. ``id`` and ``isHero`` are never taken from the caller."""

    name: StrictStr
    nickname: StrictStr
    birthday: datetime
    attributes: Attributes
    weapons: List[Weapon]
    key_attribute: StrictStr = Field(alias="keyAttribute")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "name": "Lancelot",
                "nickname": "K_lancelot",
                "birthday": "1990-01-01T00:00:00.000Z",
                "weapons": [
                    {"name": "Sword", "mod": 3, "attr": "strength", "equipped": True}
                ],
                "attributes": {
                    "strength": 10,
                    "dexterity": 10,
                    "constitution": 10,
                    "intelligence": 10,
                    "wisdom": 10,
                    "charisma": 10,
                },
                "keyAttribute": "strength",
            }
        }

    @field_validator("name")
    @classmethod
    def _name_length(cls, value: str) -> str:
        return _check_length(value, "Name", get_settings().name_max_length)

    @field_validator("nickname")
    @classmethod
    def _nickname_length(cls, value: str) -> str:
        return _check_length(value, "Nickname", get_settings().create_nickname_max_length)

    @field_validator("birthday", mode="before")
    @classmethod
    def _birthday_is_string(cls, value):
        if not isinstance(value, str):
            raise ValueError("Invalid date format. Use ISO 8601 format.")
        return value

    @field_validator("birthday")
    @classmethod
    def _birthday_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class NicknameUpdate(BaseModel):
    nickname: StrictStr

    class Config:
        json_schema_extra = {"example": {"nickname": "Sir_Lancelot"}}

    @field_validator("nickname")
    @classmethod
    def _nickname_length(cls, value: str) -> str:
        return _check_length(value, "Nickname", get_settings().update_nickname_max_length)


class KnightOut(BaseModel):
    id: str
    name: str
    nickname: str
    birthday: datetime
    attributes: Attributes
    weapons: List[Weapon]
    key_attribute: str = Field(alias="keyAttribute")
    is_hero: bool = Field(alias="isHero")

    class Config:
        from_attributes = True
        populate_by_name = True

    @field_validator("birthday")
    @classmethod
    def _birthday_utc(cls, value: datetime) -> datetime:
        # SQLite returns the stored UTC value without an offset
        return _as_utc(value)
