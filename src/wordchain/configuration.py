"""
Configuration loading and validation for wordchain.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field


class TrainingConfiguration(BaseModel):
    """
    Options controlling how training text becomes token sequences.

    :ivar lowercase: Lowercase every token before counting.
    :vartype lowercase: bool
    :ivar strip_punctuation: Drop punctuation around words.
    :vartype strip_punctuation: bool
    :ivar skip_blank_lines: Skip lines without tokens instead of training START to END.
    :vartype skip_blank_lines: bool
    :ivar encoding: Text encoding of training files.
    :vartype encoding: str
    """

    model_config = ConfigDict(extra="forbid")

    lowercase: bool = False
    strip_punctuation: bool = False
    skip_blank_lines: bool = True
    encoding: str = Field(default="utf-8", min_length=1)


class GenerationConfiguration(BaseModel):
    """
    Options controlling sentence generation.

    :ivar count: Number of sentences per request.
    :vartype count: int
    :ivar seed: Optional random seed for reproducible output.
    :vartype seed: int or None
    :ivar max_tokens: Optional cap on tokens per sentence.
    :vartype max_tokens: int or None
    :ivar separator: String placed between generated tokens.
    :vartype separator: str
    """

    model_config = ConfigDict(extra="forbid")

    count: int = Field(default=1, ge=1)
    seed: Optional[int] = None
    max_tokens: Optional[int] = Field(default=None, ge=1)
    separator: str = " "


class WordchainConfiguration(BaseModel):
    """
    Composed configuration for every wordchain command.

    :ivar training: Training options.
    :vartype training: TrainingConfiguration
    :ivar generation: Generation options.
    :vartype generation: GenerationConfiguration
    """

    model_config = ConfigDict(extra="forbid")

    training: TrainingConfiguration = Field(default_factory=TrainingConfiguration)
    generation: GenerationConfiguration = Field(default_factory=GenerationConfiguration)


def parse_override_value(raw: str) -> object:
    """
    Parse one override value with the same YAML rules as configuration files.

    ``seed=3`` yields an int, ``lowercase=true`` a bool and ``separator=_`` a string, exactly
    as those values would read inside a YAML file. Lists and mappings need flow syntax such as
    ``[a, b]``; any other text that YAML would read as a collection, or cannot read at all,
    stays a string.

    :param raw: Raw override value.
    :type raw: str
    :return: Parsed value.
    :rtype: object
    """
    stripped = str(raw).strip()
    if not stripped:
        return ""
    try:
        parsed = yaml.safe_load(stripped)
    except yaml.YAMLError:
        return stripped
    if isinstance(parsed, (list, dict)) and stripped[0] not in "[{":
        return stripped
    return parsed


def parse_dotted_overrides(pairs: Optional[List[str]]) -> Dict[str, object]:
    """
    Parse repeated key=value pairs into a dotted override mapping.

    :param pairs: Repeated command-line pairs.
    :type pairs: list[str] or None
    :return: Override mapping.
    :rtype: dict[str, object]
    :raises ValueError: If a pair is not key=value.
    """
    overrides: Dict[str, object] = {}
    for item in pairs or []:
        key, separator, raw = item.partition("=")
        if not separator:
            raise ValueError(f"Overrides must be key=value (got {item!r})")
        if not key.strip():
            raise ValueError("Override keys must be non-empty")
        overrides[key.strip()] = parse_override_value(raw)
    return overrides


def _section_for(view: Dict[str, object], dotted_key: str) -> Tuple[Dict[str, object], str]:
    path = [part.strip() for part in dotted_key.split(".")]
    if not all(path):
        raise ValueError(f"Override key has an empty section: {dotted_key!r}")
    section = view
    for name in path[:-1]:
        child = section.setdefault(name, {})
        if not isinstance(child, dict):
            raise ValueError(f"Override key {dotted_key!r} descends into the value of {name!r}")
        section = child
    return section, path[-1]


def apply_dotted_overrides(
    config: Mapping[str, object], overrides: Mapping[str, object]
) -> Dict[str, object]:
    """
    Apply dotted key overrides to a copy of a nested configuration view.

    Missing sections are created. The input view is never modified, and values of any type
    that YAML produces pass through unchanged for validation.

    :param config: Base configuration view.
    :type config: Mapping[str, object]
    :param overrides: Dotted key override mapping.
    :type overrides: Mapping[str, object]
    :return: New configuration view with overrides applied.
    :rtype: dict[str, object]
    :raises ValueError: If a key is empty or descends into a non-mapping value.
    """
    updated: Dict[str, object] = copy.deepcopy(dict(config))
    for dotted_key, value in overrides.items():
        section, name = _section_for(updated, dotted_key)
        section[name] = value
    return updated


def _merge_into(target: Dict[str, object], incoming: Mapping[str, object]) -> None:
    for key, value in incoming.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, Mapping):
            _merge_into(existing, value)
        elif isinstance(value, Mapping):
            nested: Dict[str, object] = {}
            _merge_into(nested, value)
            target[key] = nested
        else:
            target[key] = value


def load_configuration_view(configuration_paths: Iterable[str]) -> Dict[str, object]:
    """
    Compose one configuration mapping from YAML files.

    Later files are merged over earlier ones key by key. Empty files contribute nothing.

    :param configuration_paths: Configuration file paths in precedence order.
    :type configuration_paths: Iterable[str]
    :return: Composed configuration view.
    :rtype: dict[str, object]
    :raises FileNotFoundError: If any configuration file is missing.
    :raises ValueError: If any configuration file is not a mapping.
    """
    view: Dict[str, object] = {}
    for raw in configuration_paths:
        candidate = Path(raw)
        if not candidate.is_file():
            raise FileNotFoundError(f"Configuration file not found: {candidate}")
        try:
            loaded = yaml.safe_load(candidate.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ValueError(f"Configuration file is not valid YAML: {candidate}") from exc
        if loaded is None:
            continue
        if not isinstance(loaded, dict):
            raise ValueError(f"Configuration file must be a mapping/object: {candidate}")
        _merge_into(view, loaded)
    return view


def load_configuration(
    configuration_paths: Optional[Iterable[str]] = None,
    overrides: Optional[List[str]] = None,
    *,
    extra_overrides: Optional[Mapping[str, object]] = None,
) -> WordchainConfiguration:
    """
    Load, override, and validate the wordchain configuration.

    :param configuration_paths: Optional configuration file paths in precedence order.
    :type configuration_paths: Iterable[str] or None
    :param overrides: Optional repeated key=value override pairs.
    :type overrides: list[str] or None
    :param extra_overrides: Optional dotted overrides applied last, such as dedicated flags.
    :type extra_overrides: Mapping[str, object] or None
    :return: Validated configuration.
    :rtype: WordchainConfiguration
    :raises pydantic.ValidationError: If the composed configuration is invalid.
    """
    view = load_configuration_view(configuration_paths or [])
    view = apply_dotted_overrides(view, parse_dotted_overrides(overrides))
    if extra_overrides:
        view = apply_dotted_overrides(view, extra_overrides)
    return WordchainConfiguration.model_validate(view)
