from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional


class WebhookIn(BaseModel):
    url: str
    secret: Optional[str] = None

    @field_validator("url")
    @classmethod
    def url_must_be_http(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("url must be an http(s) URL")
        return value

    @field_validator("secret")
    @classmethod
    def strip_secret(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class WebhookResponse(BaseModel):
    id: int
    url: str
    has_secret: bool = Field(alias="hasSecret")
    created_at: datetime = Field(alias="createdAt")

    model_config = {"from_attributes": True, "populate_by_name": True}


class WebhookConfigRequest(BaseModel):
    webhooks: List[WebhookIn]


class WebhookConfigResponse(BaseModel):
    webhooks: List[WebhookResponse]


class WebhookTestResponse(BaseModel):
    success: bool
    error: Optional[str] = None
