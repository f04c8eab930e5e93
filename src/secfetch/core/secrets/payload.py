"""Key extraction from structured (JSON or YAML) secret bodies."""

from __future__ import annotations

import json
import logging
from collections.abc import Hashable, Mapping
from typing import Any

import yaml

from secfetch.core.secrets.exceptions import KeyNotFoundError, UnparseableBodyError

logger = logging.getLogger(__name__)

_MISSING = object()


class StrictSafeLoader(yaml.SafeLoader):
    """``SafeLoader`` that rejects duplicate mapping keys."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            if key_node.tag == "tag:yaml.org,2002:merge":
                continue
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                continue
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def render_value(value: Any) -> str:
    """Render an extracted field as substitution text.

    Strings pass through, booleans render as ``true``/``false``, null as an
    empty string and nested mappings or lists as compact JSON.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (Mapping, list)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def decode_mapping(body: str) -> Mapping[Any, Any] | None:
    """Decode *body* as a JSON mapping, falling back to a YAML mapping.

    Returns ``None`` when neither format yields a mapping.
    """
    try:
        data = json.loads(body)
    except ValueError:
        data = None
    if isinstance(data, Mapping):
        return data

    try:
        data = yaml.load(body, Loader=StrictSafeLoader)  # noqa: S506
    except yaml.YAMLError as exc:
        logger.debug("Body is neither JSON nor YAML: %s", exc)
        return None
    return data if isinstance(data, Mapping) else None


def extract_key(body: str, key: str) -> str:
    """Look up *key* in a JSON or YAML encoded body.

    Args:
        body: Raw secret body.
        key: Top-level field name. Dots are part of the name, not a path.

    Raises:
        UnparseableBodyError: If the body is not a JSON or YAML mapping.
        KeyNotFoundError: If the mapping has no such key.
    """
    data = decode_mapping(body)
    if data is None:
        raise UnparseableBodyError(f"cannot decode body as JSON or YAML to look up key {key}")

    value = data.get(key, _MISSING)
    if value is _MISSING:
        raise KeyNotFoundError(f"key {key} not found in secret body")
    return render_value(value)
