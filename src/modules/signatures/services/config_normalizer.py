"""
Normalizes macro configurations stored in the legacy parameter format.

Macros migrated from the older server product keep their old parameter
names until the author re-saves the configuration. This runs once where the
configuration is loaded, so nothing downstream has to know about the old
shape.

Parameter mapping:

    body                -> content                          (rename)
    inheritSigners      -> inheritViewers + inheritEditors  (enum split)
    maxSignatures -1    -> unset
    visibilityLimit -1  -> unset
    signaturesVisible   -> uppercase ("always" -> "ALWAYS")
    pendingVisible      -> uppercase
    notified, panel, protectedContent -> dropped
"""

from typing import Optional

INHERIT_SIGNERS_MAP = {
    "none":                {"inheritViewers": False, "inheritEditors": False},
    "readers only":        {"inheritViewers": True,  "inheritEditors": False},
    "writers only":        {"inheritViewers": False, "inheritEditors": True},
    "readers and writers": {"inheritViewers": True,  "inheritEditors": True},
}

VISIBILITY_UPPERCASE = {
    "always":       "ALWAYS",
    "if signatory": "IF_SIGNATORY",
    "if signed":    "IF_SIGNED",
}

NUMERIC_LIMIT_FIELDS = ("maxSignatures", "visibilityLimit")
VISIBILITY_FIELDS = ("signaturesVisible", "pendingVisible")
DROPPED_FIELDS = ("notified", "panel", "protectedContent")


def is_legacy_config(config: dict) -> bool:
    return "inheritSigners" in config or "inheritViewers" not in config


def normalize_legacy_config(config: Optional[dict]) -> Optional[dict]:
    """
    Returns the config unchanged if it is already in the current format,
    otherwise a copy with every legacy field translated.

    Raises:
        ValueError: if a legacy limit is not a number
    """
    if not config:
        return config

    if not is_legacy_config(config):
        return config

    out = dict(config)

    # body -> content, keeping an explicit content if both are present
    if "body" in out:
        body = out.pop("body")
        out.setdefault("content", body)

    inherit_signers = out.pop("inheritSigners", None)
    if not isinstance(inherit_signers, str):
        inherit_signers = "none"
    out.update(INHERIT_SIGNERS_MAP.get(inherit_signers, INHERIT_SIGNERS_MAP["none"]))

    for field in NUMERIC_LIMIT_FIELDS:
        value = out.get(field)
        if value is None or value == "":
            continue
        try:
            number = int(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid macro configuration: {field} must be a number") from e
        if number == -1:
            del out[field]
        else:
            out[field] = number

    for field in VISIBILITY_FIELDS:
        value = out.get(field)
        if isinstance(value, str) and value:
            out[field] = VISIBILITY_UPPERCASE.get(value.lower(), value)

    for field in DROPPED_FIELDS:
        out.pop(field, None)

    return out
