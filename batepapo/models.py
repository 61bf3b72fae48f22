# Pydantic schemas for documents stored in the participants / messages collections.
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, constr, field_validator

NonEmpty = constr(strict=True, strip_whitespace=True, min_length=1)

MESSAGE_TYPES = ("message", "private_message")
STATUS_TYPE = "status"


class ParticipantIn(BaseModel):
    name: NonEmpty


class Participant(BaseModel):
    name: str
    lastStatus: int


class MessageIn(BaseModel):
    """A user-authored message as posted or edited through the API."""

    model_config = ConfigDict(populate_by_name=True)

    frm: NonEmpty = Field(..., alias="from")
    to: NonEmpty
    text: NonEmpty
    type: Literal["message", "private_message"]
    time: Any = Field(...)

    @field_validator("time")
    @classmethod
    def _time_present(cls, v):
        if v is None or v == "":
            raise ValueError("time is required")
        return v

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


class Message(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    frm: str = Field(..., alias="from")
    to: str
    text: str
    type: str
    time: str
