"""
Unit tests for configuration loading.
"""

from __future__ import annotations

import datetime

import pytest
from pydantic import ValidationError

from wordchain.configuration import (
    WordchainConfiguration,
    apply_dotted_overrides,
    load_configuration,
    load_configuration_view,
    parse_dotted_overrides,
    parse_override_value,
)


def test_defaults_without_files():
    configuration = load_configuration()
    assert configuration == WordchainConfiguration()
    assert configuration.training.skip_blank_lines is True
    assert configuration.generation.count == 1
    assert configuration.generation.separator == " "


def test_later_files_merge_over_earlier_ones(tmp_path):
    """
    Nested keys merge instead of replacing whole sections.
    """
    base = tmp_path / "base.yml"
    local = tmp_path / "local.yml"
    base.write_text("training:\n  lowercase: true\n  encoding: latin-1\n", encoding="utf-8")
    local.write_text("training:\n  encoding: utf-8\ngeneration:\n  count: 3\n", encoding="utf-8")
    view = load_configuration_view([str(base), str(local)])
    assert view == {
        "training": {"lowercase": True, "encoding": "utf-8"},
        "generation": {"count": 3},
    }


def test_empty_file_contributes_nothing(tmp_path):
    empty = tmp_path / "empty.yml"
    empty.write_text("", encoding="utf-8")
    assert load_configuration_view([str(empty)]) == {}


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="Configuration file not found"):
        load_configuration_view([str(tmp_path / "missing.yml")])


def test_non_mapping_file(tmp_path):
    path = tmp_path / "list.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError, match="must be a mapping"):
        load_configuration_view([str(path)])


def test_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yml"
    path.write_text("training: [unclosed\n", encoding="utf-8")
    with pytest.raises(ValueError, match="not valid YAML"):
        load_configuration_view([str(path)])


def test_dotted_overrides_parse_scalars():
    overrides = parse_dotted_overrides(
        ["generation.seed=-3", "training.lowercase=true", "generation.separator=_", "x.y=null"]
    )
    assert overrides == {
        "generation.seed": -3,
        "training.lowercase": True,
        "generation.separator": "_",
        "x.y": None,
    }


def test_dotted_overrides_reject_malformed_pairs():
    with pytest.raises(ValueError, match="key=value"):
        parse_dotted_overrides(["novalue"])
    with pytest.raises(ValueError, match="non-empty"):
        parse_dotted_overrides(["=1"])


def test_apply_overrides_leaves_input_untouched():
    base = {"generation": {"count": 1}}
    updated = apply_dotted_overrides(base, {"generation.count": 4, "training.lowercase": True})
    assert base == {"generation": {"count": 1}}
    assert updated == {"generation": {"count": 4}, "training": {"lowercase": True}}


def test_load_configuration_applies_files_then_overrides_then_flags(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("generation:\n  count: 2\n  seed: 1\n", encoding="utf-8")
    configuration = load_configuration(
        [str(path)],
        ["generation.seed=5", "generation.max_tokens=9"],
        extra_overrides={"generation.seed": 7},
    )
    assert configuration.generation.count == 2
    assert configuration.generation.seed == 7
    assert configuration.generation.max_tokens == 9


def test_unknown_keys_are_rejected():
    with pytest.raises(ValidationError):
        load_configuration(overrides=["generation.temperature=0.5"])


def test_out_of_range_values_are_rejected():
    with pytest.raises(ValidationError):
        load_configuration(overrides=["generation.count=0"])


def test_yaml_values_json_cannot_hold_reach_validation(tmp_path):
    """
    A YAML date is a valid document value and must fail validation, not the override step.
    """
    path = tmp_path / "config.yml"
    path.write_text("generation:\n  seed: 2024-01-01\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_configuration([str(path)], ["generation.count=2"])


def test_apply_overrides_keeps_non_json_values():
    base = {"generation": {"seed": datetime.date(2024, 1, 1)}}
    updated = apply_dotted_overrides(base, {"generation.count": 2})
    assert updated == {"generation": {"seed": datetime.date(2024, 1, 1), "count": 2}}
    assert updated["generation"] is not base["generation"]


def test_override_values_follow_yaml_rules():
    assert parse_override_value("3") == 3
    assert parse_override_value("0.5") == 0.5
    assert parse_override_value("True") is True
    assert parse_override_value("~") is None
    assert parse_override_value("[1, 2]") == [1, 2]
    assert parse_override_value("'007'") == "007"
    assert parse_override_value("-") == "-"
    assert parse_override_value("a: b") == "a: b"
    assert parse_override_value("  ") == ""


def test_override_cannot_descend_into_a_value():
    with pytest.raises(ValueError, match="descends into the value of 'count'"):
        apply_dotted_overrides({"generation": {"count": 2}}, {"generation.count.x": 1})
    with pytest.raises(ValueError, match="empty section"):
        apply_dotted_overrides({}, {"generation..count": 1})
