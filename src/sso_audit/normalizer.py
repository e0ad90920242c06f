"""Canonicalization of federation payloads ahead of validation."""

from __future__ import annotations
import copy
from collections.abc import Mapping, MutableMapping
from typing import Any


_METADATA_FIELDS = ("metadata_url", "metadata_xml")

MAX_NESTING_DEPTH = 64
"""Deepest container nesting accepted in a payload."""


def exceeds_depth(value: Any, limit: int = MAX_NESTING_DEPTH) -> bool:
    """Return whether ``value`` nests objects or arrays more than ``limit`` deep."""
    stack: list[tuple[Any, int]] = [(value, 1)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, Mapping):
            children = list(node.values())
        elif isinstance(node, list | tuple):
            children = list(node)
        else:
            continue
        if depth > limit:
            return True
        stack.extend((child, depth + 1) for child in children)
    return False


def normalize(payload: Any) -> Any:
    """Return a canonical deep copy of ``payload``.

    The caller's value is never touched; the returned object is owned by the
    caller and shares no containers with the input. Shapes that do not match
    a rule pass through unchanged so the validator can report them.
    """
    normalized = copy.deepcopy(payload)
    if not isinstance(normalized, MutableMapping):
        return normalized

    saml = normalized.get("saml")
    if isinstance(saml, MutableMapping):
        _normalize_saml(saml)

    domains = normalized.get("domains")
    if isinstance(domains, list):
        for binding in domains:
            if isinstance(binding, MutableMapping) and isinstance(
                binding.get("domain"), str
            ):
                binding["domain"] = binding["domain"].strip().lower()

    return normalized


def _normalize_saml(saml: MutableMapping[str, Any]) -> None:
    for key in _METADATA_FIELDS:
        if isinstance(saml.get(key), str):
            saml[key] = saml[key].strip()

    mapping = saml.get("attribute_mapping")
    if not isinstance(mapping, MutableMapping):
        return
    rules = mapping.get("keys")
    if not isinstance(rules, MutableMapping):
        return
    for rule in rules.values():
        if isinstance(rule, MutableMapping):
            _normalize_rule(rule)


def _normalize_rule(rule: MutableMapping[str, Any]) -> None:
    if isinstance(rule.get("name"), str):
        rule["name"] = rule["name"].strip()
    sources = rule.get("sources")
    if isinstance(sources, list):
        trimmed = [item.strip() if isinstance(item, str) else item for item in sources]
        rule["sources"] = [item for item in trimmed if item]


__all__ = ["MAX_NESTING_DEPTH", "exceeds_depth", "normalize"]
