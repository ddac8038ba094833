from pydantic import BaseModel
from typing import Optional


class HostContext(BaseModel):
    account_id: str
    page_id: Optional[str] = None
    # Raw macro configuration, normalized where it is consumed
    config: Optional[dict] = None
