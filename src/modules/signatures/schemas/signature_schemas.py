from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class SignRequest(BaseModel):
    # Optional so that missing fields are reported as 400, not 422
    hash: Optional[str] = None
    page_id: Optional[str] = Field(None, alias="pageId")

    model_config = {"populate_by_name": True}


class SignatureResponse(BaseModel):
    account_id: str = Field(alias="accountId")
    signed_at: datetime = Field(alias="signedAt")

    model_config = {"from_attributes": True, "populate_by_name": True}


class ContractResponse(BaseModel):
    hash: str
    page_id: str = Field(alias="pageId")
    created_at: datetime = Field(alias="createdAt")
    deleted_at: Optional[datetime] = Field(None, alias="deletedAt")

    model_config = {"from_attributes": True, "populate_by_name": True}


class SignResponse(BaseModel):
    allowed: bool
    reason: str
    code: str
    message: str
    contract: ContractResponse
    signatures: List[SignatureResponse]


class SignaturesResponse(BaseModel):
    hash: str
    contract: Optional[ContractResponse] = None
    signatures: List[SignatureResponse] = []


class AuthorizationResponse(BaseModel):
    allowed: bool
    reason: str
    code: str
    signatures_visible: bool = Field(alias="signaturesVisible")
    pending_visible: bool = Field(alias="pendingVisible")

    model_config = {"populate_by_name": True}


class PageEventRequest(BaseModel):
    event_type: str = Field(alias="eventType")
    content: Optional[dict] = None

    model_config = {"populate_by_name": True}


class PageEventResponse(BaseModel):
    affected: Optional[int] = None


class StatisticsResponse(BaseModel):
    total_contracts: int = Field(alias="totalContracts")
    active_contracts: int = Field(alias="activeContracts")
    deleted_contracts: int = Field(alias="deletedContracts")
    total_signatures: int = Field(alias="totalSignatures")

    model_config = {"populate_by_name": True}
