import logging
from enum import Enum as PyEnum
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from modules.signatures.services.config_normalizer import normalize_legacy_config

logger = logging.getLogger(__name__)


class Visibility(str, PyEnum):
    ALWAYS = "ALWAYS"
    IF_SIGNATORY = "IF_SIGNATORY"
    IF_SIGNED = "IF_SIGNED"


class SignerConfiguration(BaseModel):
    """Trusted, canonical signing policy of one macro instance."""

    signers: List[str] = Field(default_factory=list)
    signer_groups: List[str] = Field(default_factory=list, alias="signerGroups")
    inherit_viewers: bool = Field(False, alias="inheritViewers")
    inherit_editors: bool = Field(False, alias="inheritEditors")
    # None means unlimited
    max_signatures: Optional[int] = Field(None, alias="maxSignatures")

    title: Optional[str] = None
    content: Optional[str] = None

    signatures_visible: Visibility = Field(Visibility.ALWAYS, alias="signaturesVisible")
    pending_visible: Visibility = Field(Visibility.ALWAYS, alias="pendingVisible")
    visibility_limit: Optional[int] = Field(None, alias="visibilityLimit")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("signer_groups", mode="before")
    @classmethod
    def drop_invalid_group_ids(cls, value):
        # One bad entry must not invalidate the rest of the policy
        if not isinstance(value, list):
            return value
        kept = []
        for group_id in value:
            if isinstance(group_id, str):
                kept.append(group_id)
            else:
                logger.warning("Skipping invalid signer group id %r", group_id)
        return kept

    @property
    def is_petition(self) -> bool:
        return (
            not self.signers
            and not self.signer_groups
            and not self.inherit_viewers
            and not self.inherit_editors
        )


def load_signer_configuration(raw: Optional[dict]) -> SignerConfiguration:
    """
    Normalize and validate a raw macro configuration.

    Raises:
        ValueError: if the configuration is missing or malformed
    """
    if raw is None:
        raise ValueError("Missing macro configuration")
    if not isinstance(raw, dict):
        raise ValueError("Macro configuration must be an object")

    try:
        return SignerConfiguration.model_validate(normalize_legacy_config(raw))
    except ValidationError as e:
        raise ValueError(f"Invalid macro configuration: {e.error_count()} error(s)") from e
