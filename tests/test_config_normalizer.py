import pytest

from modules.signatures.schemas.signer_config import Visibility, load_signer_configuration
from modules.signatures.services.config_normalizer import is_legacy_config, normalize_legacy_config


def test_current_format_is_untouched():
    config = {"inheritViewers": True, "inheritEditors": False, "signers": ["a"]}
    assert not is_legacy_config(config)
    assert normalize_legacy_config(config) is config


def test_empty_config_returned_as_is():
    assert normalize_legacy_config({}) == {}
    assert normalize_legacy_config(None) is None


@pytest.mark.parametrize("value,viewers,editors", [
    ("none", False, False),
    ("readers only", True, False),
    ("writers only", False, True),
    ("readers and writers", True, True),
    ("something else", False, False),
])
def test_inherit_signers_split(value, viewers, editors):
    out = normalize_legacy_config({"inheritSigners": value})
    assert "inheritSigners" not in out
    assert out["inheritViewers"] is viewers
    assert out["inheritEditors"] is editors


def test_legacy_fields_translated():
    legacy = {
        "title": "Policy",
        "body": "Legacy text",
        "inheritSigners": "readers only",
        "maxSignatures": "-1",
        "visibilityLimit": "5",
        "signaturesVisible": "if signatory",
        "pendingVisible": "always",
        "notified": ["x"],
        "panel": True,
        "protectedContent": False,
    }
    out = normalize_legacy_config(legacy)

    assert out["content"] == "Legacy text"
    assert "body" not in out
    assert "maxSignatures" not in out
    assert out["visibilityLimit"] == 5
    assert out["signaturesVisible"] == "IF_SIGNATORY"
    assert out["pendingVisible"] == "ALWAYS"
    for dropped in ("notified", "panel", "protectedContent"):
        assert dropped not in out
    # Input is not mutated
    assert legacy["body"] == "Legacy text"


def test_explicit_content_wins_over_body():
    out = normalize_legacy_config({"body": "old", "content": "new"})
    assert out["content"] == "new"


def test_load_legacy_configuration():
    config = load_signer_configuration({"inheritSigners": "writers only", "maxSignatures": -1,
                                        "signaturesVisible": "if signed"})
    assert config.inherit_editors and not config.inherit_viewers
    assert config.max_signatures is None
    assert config.signatures_visible == Visibility.IF_SIGNED
    assert not config.is_petition


def test_load_configuration_rejects_missing_and_malformed():
    with pytest.raises(ValueError):
        load_signer_configuration(None)
    with pytest.raises(ValueError):
        load_signer_configuration(["not", "a", "dict"])
    with pytest.raises(ValueError):
        load_signer_configuration({"inheritViewers": False, "maxSignatures": "many"})


def test_empty_configuration_is_petition():
    config = load_signer_configuration({"inheritViewers": False})
    assert config.is_petition
    assert config.signatures_visible == Visibility.ALWAYS


def test_non_string_group_ids_are_dropped():
    config = load_signer_configuration({"signers": ["alice"], "signerGroups": [None, 42, "legal"],
                                        "inheritViewers": False})
    assert config.signers == ["alice"]
    assert config.signer_groups == ["legal"]


@pytest.mark.parametrize("value", [[1], {"n": 1}, "many"])
def test_non_numeric_legacy_limit_rejected(value):
    with pytest.raises(ValueError):
        normalize_legacy_config({"maxSignatures": value})
    with pytest.raises(ValueError):
        load_signer_configuration({"visibilityLimit": value})


def test_non_string_inherit_signers_treated_as_none():
    out = normalize_legacy_config({"inheritSigners": ["readers only"]})
    assert out["inheritViewers"] is False
    assert out["inheritEditors"] is False
