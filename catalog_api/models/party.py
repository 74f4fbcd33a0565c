from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PartyCreate(BaseModel):
    name: str

    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def check_not_blank(cls, value):
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class PartyReplace(PartyCreate):
    version: Optional[int] = Field(default=None, ge=0)


class PartyPatch(BaseModel):
    name: Optional[str] = None
    version: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


class PartyResponse(BaseModel):
    id: str
    version: int
    name: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(extra="ignore")
