from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

PAGE_SIZE = 3


class Article(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    uuid: str
    title: str = ""
    description: str = ""
    keywords: str = ""
    snippet: str = ""
    url: str = ""
    image_url: str = ""
    language: str = ""
    published_at: str = ""
    source: str = ""
    categories: List[str] = Field(default_factory=list)

    @field_validator(
        "title", "description", "keywords", "snippet", "url", "image_url",
        "language", "published_at", "source", mode="before",
    )
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v


class PageMeta(BaseModel):
    found: int = 0
    returned: int = 0
    limit: int = PAGE_SIZE
    page: int = 1


class NewsResponse(BaseModel):
    meta: PageMeta = Field(default_factory=PageMeta)
    data: List[Article] = Field(default_factory=list)


class NewsQuery(BaseModel):
    categories: Optional[str] = None
    search: Optional[str] = None
    page: int = Field(1, ge=1)
    limit: int = Field(PAGE_SIZE, ge=1, le=100)
    language: str = "en"

    @field_validator("categories", "search", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("language", mode="before")
    @classmethod
    def _default_language(cls, v):
        if isinstance(v, str):
            v = v.strip()
        return v or "en"

    @field_validator("page", "limit", mode="before")
    @classmethod
    def _blank_int(cls, v, info):
        if isinstance(v, str) and not v.strip():
            return 1 if info.field_name == "page" else PAGE_SIZE
        return v
