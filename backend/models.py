from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from constants import (
    SKILL_MIN, SKILL_MAX,
    NUMBER_OF_GROUPS_DEFAULT, NUMBER_OF_GROUPS_MIN, NUMBER_OF_GROUPS_MAX,
    PLAYER_NAME_MAX_LENGTH, OUTING_NAME_MAX_LENGTH
)


def _strip(v):
    # Runs before the length checks so they see the trimmed name
    return v.strip() if isinstance(v, str) else v


class CamelModel(BaseModel):
    """Serializes as camelCase, accepts either camelCase or snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GroupingMode(str, Enum):
    BALANCED = "balanced"
    RANDOMIZED = "randomized"


# ============ PLAYERS ============

class PlayerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=PLAYER_NAME_MAX_LENGTH)
    skill: int = Field(..., ge=SKILL_MIN, le=SKILL_MAX)

    @field_validator('name', mode='before')
    @classmethod
    def name_cleaned(cls, v):
        return _strip(v)


class PlayerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=PLAYER_NAME_MAX_LENGTH)
    skill: Optional[int] = Field(default=None, ge=SKILL_MIN, le=SKILL_MAX)

    @field_validator('name', mode='before')
    @classmethod
    def name_cleaned(cls, v):
        return _strip(v)


class PlayerResponse(BaseModel):
    id: str
    name: str
    skill: int


# ============ OUTINGS ============

class OutingCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=OUTING_NAME_MAX_LENGTH)
    number_of_groups: int = Field(
        default=NUMBER_OF_GROUPS_DEFAULT, ge=NUMBER_OF_GROUPS_MIN, le=NUMBER_OF_GROUPS_MAX
    )

    @field_validator('name', mode='before')
    @classmethod
    def name_cleaned(cls, v):
        return _strip(v)


class OutingUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=OUTING_NAME_MAX_LENGTH)
    number_of_groups: Optional[int] = Field(default=None, ge=NUMBER_OF_GROUPS_MIN, le=NUMBER_OF_GROUPS_MAX)

    @field_validator('name', mode='before')
    @classmethod
    def name_cleaned(cls, v):
        return _strip(v)


class OutingResponse(CamelModel):
    id: str
    name: str
    number_of_groups: int


class MembershipCreate(CamelModel):
    player_id: str = Field(..., min_length=1)


# ============ GROUPS ============

class Group(CamelModel):
    name: str
    players: list[PlayerResponse] = Field(default_factory=list)
    total_skill: int = 0


class GroupsResponse(CamelModel):
    outing_name: str
    number_of_groups: Optional[int] = None
    groups: list[Group]
    message: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
