"""Declarative token space layouts.

Layouts can be described in YAML instead of Python. A file holds either a
single space:

    name: ginger
    dynamic: true
    kinds:
      - name: GingerToken
        names: [TEXT_START, TEXT_END, AUDIO_START, AUDIO_END, AWAIT_AUDIO]
      - name: TextTokens
        range: 1000

or shared kinds plus several spaces that reference them by name:

    kinds:
      - {name: MaoToken, names: [PROGRAM_START, PROGRAM_END, FN, STRUCT]}
    spaces:
      - {name: small, kinds: [MaoToken]}
      - {name: large, kinds: [MaoToken], dynamic_size: 500}

Kinds referenced by name may also come from a caller-supplied registry of
Python-defined kinds.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import yaml

from ..core.space import DEFAULT_ID_BITS, TokenSpace, define_space
from ..core.token import define_names, define_range, is_token_kind

logger = logging.getLogger(__name__)

_SPACE_KEYS = {"name", "kinds", "dynamic", "dynamic_size", "id_bits"}


def load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def kind_from_config(entry, registry: Mapping[str, type]) -> type:
    """Resolve one `kinds` entry to a token kind class."""
    if isinstance(entry, str):
        try:
            return registry[entry]
        except KeyError:
            raise ValueError(f"Unknown token kind: {entry!r}") from None

    if not isinstance(entry, Mapping) or "name" not in entry:
        raise ValueError(f"Kind entry needs a name: {entry!r}")
    name = entry["name"]
    has_names = "names" in entry
    has_range = "range" in entry
    if has_names == has_range:
        raise ValueError(f"Kind {name!r} must give exactly one of 'names' or 'range'")

    if has_names:
        names = entry["names"] or []
        # YAML turns bare ON/OFF/YES into booleans
        bad = [n for n in names if not isinstance(n, str)]
        if bad:
            raise ValueError(f"Kind {name!r} member names must be strings, got {bad!r}")
        return define_names(name, names)
    count = entry["range"]
    if not isinstance(count, int) or isinstance(count, bool):
        raise ValueError(f"Kind {name!r} range must be an integer, got {count!r}")
    return define_range(name, count)


def declare_kinds(entries, registry: Optional[Mapping[str, type]] = None) -> Dict[str, type]:
    """Declare a list of kinds, returning a name -> kind registry."""
    kinds = dict(registry or {})
    for entry in entries or []:
        kind = kind_from_config(entry, kinds)
        kinds[kind.__name__] = kind
    return kinds


def space_from_config(config: Mapping[str, Any],
                      registry: Optional[Mapping[str, type]] = None) -> TokenSpace:
    """Build a TokenSpace from a single-space description."""
    unknown = set(config) - _SPACE_KEYS
    if unknown:
        raise ValueError(f"Unknown token space keys: {sorted(unknown)}")
    if "name" not in config:
        raise ValueError("Token space description needs a name")

    registry = dict(registry or {})
    for name, kind in registry.items():
        if not is_token_kind(kind):
            raise ValueError(f"Registry entry {name!r} is not a token kind")

    dynamic = config.get("dynamic", False)
    # a quoted "false" would otherwise be truthy
    if not isinstance(dynamic, bool):
        raise ValueError(
            f"Token space {config['name']!r} dynamic must be true or false, got {dynamic!r}")

    kinds = [kind_from_config(entry, registry) for entry in config.get("kinds") or []]
    return define_space(
        config["name"],
        kinds,
        dynamic=dynamic,
        dynamic_size=config.get("dynamic_size"),
        id_bits=config.get("id_bits", DEFAULT_ID_BITS),
    )


def spaces_from_config(config: Mapping[str, Any],
                       registry: Optional[Mapping[str, type]] = None) -> Dict[str, TokenSpace]:
    """Build every space in a description.

    A description without a `spaces` list is treated as a single space.
    """
    if "spaces" not in config:
        space = space_from_config(config, registry)
        return {space.name: space}

    kinds = declare_kinds(config.get("kinds"), registry)
    spaces = {}
    for entry in config["spaces"] or []:
        space = space_from_config(entry, kinds)
        if space.name in spaces:
            raise ValueError(f"Duplicate token space name: {space.name!r}")
        spaces[space.name] = space
    return spaces


def load_space(path: str, registry: Optional[Mapping[str, type]] = None) -> TokenSpace:
    """Load a single-space YAML description."""
    space = space_from_config(load_yaml(path), registry)
    logger.debug("Loaded token space %r from %s (reserved=%d)",
                 space.name, path, space.reserved)
    return space


def load_spaces(path: str, registry: Optional[Mapping[str, type]] = None) -> Dict[str, TokenSpace]:
    """Load every space from a YAML description."""
    spaces = spaces_from_config(load_yaml(path), registry)
    logger.debug("Loaded %d token spaces from %s", len(spaces), path)
    return spaces
