from datetime import date
from pydantic import BaseModel, ConfigDict, field_validator


class TodoRequest(BaseModel):
    title: str
    writer: str
    complete: bool = False
    due_date: date | None = None

    @field_validator('title', 'writer')
    @classmethod
    def validate_not_blank(cls, value, info):
        if not value or not value.strip():
            raise ValueError(f'{info.field_name} cannot be empty')
        return value.strip()


class TodoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tno: int
    title: str
    writer: str
    complete: bool
    due_date: date | None


class TodoRegisterResponse(BaseModel):
    tno: int
