from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SaveSource = Literal["Extension", "iOS Shortcut"]


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CanonicalizeRequest(BaseModel):
    url: str = Field(min_length=1)


class CanonicalizeOut(BaseModel):
    canonical: str
    hash: str


class SaveRequest(CamelModel):
    url: str = Field(min_length=1)
    title: str = Field(min_length=1)
    tags: list[str]
    source: SaveSource = "Extension"
    force_update: bool = Field(default=False, alias="forceUpdate")
    record_id: str | None = Field(default=None, alias="recordId")


class ExistingData(CamelModel):
    title: str
    tags: list[str] = Field(default_factory=list)
    status: str | None = None
    done_date: str | None = Field(default=None, alias="doneDate")


class SaveOut(CamelModel):
    duplicate: bool
    id: str | None = None
    existing_id: str | None = Field(default=None, alias="existingId")
    existing_data: ExistingData | None = Field(default=None, alias="existingData")
    updated: bool = False


class CheckRequest(BaseModel):
    url: str = Field(min_length=1)


class CheckOut(CamelModel):
    exists: bool
    record_id: str | None = Field(default=None, alias="recordId")
    canonical_url: str = Field(alias="canonicalUrl")
    existing_data: ExistingData | None = Field(default=None, alias="existingData")


class TagsOut(BaseModel):
    tags: list[str] = Field(default_factory=list)
    count: int


class RecordRequest(CamelModel):
    record_id: str = Field(min_length=1, alias="recordId")


class MarkDoneOut(CamelModel):
    success: bool
    record_id: str = Field(alias="recordId")
    done_date: str | None = Field(default=None, alias="doneDate")


class StatusOut(CamelModel):
    success: bool
    record_id: str = Field(alias="recordId")
    status: str | None = None


class DeleteOut(BaseModel):
    success: bool
