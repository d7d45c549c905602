"""Strict, schema-owned configuration reader for `stepkit`.

Every key a schema reads is marked as consumed. Once parsing is done,
`assert_consumed()` fails on any key nobody asked for, so a typo in a
user-authored file is a hard error instead of a silently ignored setting.
"""

from __future__ import annotations

import datetime
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable

_MISSING = object()


def _join_path(parent: str, key: str) -> str:
    if not parent:
        return key
    return f"{parent}.{key}"


def yaml_type_name(value: Any) -> str:
    """Name a parsed value by its YAML kind rather than its Python class."""

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (bytes, bytearray)):
        return "binary"
    if isinstance(value, (datetime.date, datetime.datetime)):
        return "timestamp"
    if isinstance(value, Mapping):
        return "mapping"
    if isinstance(value, (list, tuple, set)):
        return "list"
    return "unknown"


def _scalar_text(value: Any) -> str | None:
    """Text of a string-compatible scalar, or None for nulls and collections."""

    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, datetime.date)):
        return str(value)
    return None


@dataclass
class ConfigNamespace:
    """Small helper for schema-owned config parsing with consumed-keys enforcement."""

    data: Mapping[Any, Any]
    path: str
    _consumed: set[str] = field(default_factory=set, init=False, repr=False)
    _children: dict[str, "ConfigNamespace"] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def from_value(cls, value: Any, *, path: str) -> "ConfigNamespace":
        if not isinstance(value, Mapping):
            label = path or "<root>"
            raise TypeError(f"{label} must be a mapping (got {yaml_type_name(value)})")
        return cls(dict(value), path=path)

    def _consume(self, key: str) -> None:
        self._consumed.add(key)

    def consumed_keys(self) -> tuple[str, ...]:
        return tuple(sorted(self._consumed))

    def unconsumed_keys(self) -> tuple[str, ...]:
        return tuple(sorted(str(k) for k in self.data.keys() if k not in self._consumed))

    def assert_consumed(self) -> None:
        unknown = list(self.unconsumed_keys())
        if unknown:
            path = self.path or "<root>"
            allowed = ", ".join(self.consumed_keys()) or "<none>"
            raise ValueError(
                f"Unknown config keys under {path}: {', '.join(unknown)} (allowed: {allowed})"
            )
        for child in self._children.values():
            child.assert_consumed()

    def _adopt(self, name: str, raw: Any) -> "ConfigNamespace":
        child = ConfigNamespace.from_value(raw, path=_join_path(self.path, name))
        self._children[name] = child
        return child

    def _get_raw(self, key: str, *, default: Any) -> Any:
        if not isinstance(key, str) or not key.strip():
            raise TypeError("ConfigNamespace key must be a non-empty string")
        normalized = key.strip()
        if normalized in self._children:
            raise ValueError(
                f"{_join_path(self.path, normalized)} already accessed as a nested namespace"
            )

        if normalized not in self.data:
            if default is _MISSING:
                raise ValueError(f"Missing required config key: {_join_path(self.path, normalized)}")
            self._consume(normalized)
            return default

        self._consume(normalized)
        return self.data.get(normalized)

    def namespace(
        self,
        key: str,
        *,
        default: Mapping[str, Any] | None | object = _MISSING,
    ) -> "ConfigNamespace":
        normalized = (key or "").strip()
        if not normalized:
            raise TypeError("ConfigNamespace key must be a non-empty string")
        if normalized in self._children:
            return self._children[normalized]

        raw = self.data.get(normalized) if normalized in self.data else None
        self._consume(normalized)

        if raw is None:
            if default is _MISSING:
                raise ValueError(f"Missing required config namespace: {_join_path(self.path, normalized)}")
            if default is None:
                return self._adopt(normalized, {})
            if not isinstance(default, Mapping):
                raise TypeError(
                    f"default for {_join_path(self.path, normalized)} must be a mapping or None"
                )
            return self._adopt(normalized, dict(default))

        return self._adopt(normalized, raw)

    def get_int(self, key: str, *, default: int | object = _MISSING) -> int:
        if default is not _MISSING and (isinstance(default, bool) or not isinstance(default, int)):
            raise TypeError(f"{_join_path(self.path, key.strip())} default must be an int")

        raw = self._get_raw(key, default=default)
        if raw is default and default is not _MISSING:
            return int(default)
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise TypeError(
                f"{_join_path(self.path, key.strip())} must be an integer (got {yaml_type_name(raw)})"
            )
        return int(raw)

    def get_str(
        self,
        key: str,
        *,
        default: str | None | object = _MISSING,
        allow_empty: bool = False,
        nullable: bool = True,
        choices: Iterable[str] | None = None,
    ) -> str | None:
        """Read a string value exactly as written (no trimming).

        Other scalars (`dir: 1`, `workspace: 2020`) are read as their text.
        An explicit YAML null returns None when `nullable` is set and is a
        type error otherwise.
        """

        if default is not _MISSING and default is not None and not isinstance(default, str):
            raise TypeError(f"{_join_path(self.path, key.strip())} default must be a string or None")

        raw = self._get_raw(key, default=default)
        if raw is None and nullable:
            return None

        text = _scalar_text(raw)
        if text is None:
            raise TypeError(
                f"{_join_path(self.path, key.strip())} must be a string (got {yaml_type_name(raw)})"
            )
        raw = text
        if not raw.strip() and not allow_empty:
            raise ValueError(f"{_join_path(self.path, key.strip())} cannot be empty")
        if choices is not None:
            choice_set = {str(item) for item in choices}
            if raw not in choice_set:
                allowed = ", ".join(sorted(choice_set)) or "<none>"
                raise ValueError(
                    f"{_join_path(self.path, key.strip())} must be one of: {allowed} (got {raw!r})"
                )
        return raw

    def get_list_str(
        self,
        key: str,
        *,
        default: list[str] | tuple[str, ...] | object = _MISSING,
        allow_empty: bool = False,
    ) -> list[str]:
        if default is not _MISSING and not isinstance(default, (list, tuple)):
            raise TypeError(f"{_join_path(self.path, key.strip())} default must be a list[str]")

        raw = self._get_raw(key, default=default)
        if raw is default and default is not _MISSING:
            raw = list(default)  # type: ignore[arg-type]
        if raw is None:
            raw = []

        if not isinstance(raw, (list, tuple)):
            raise TypeError(
                f"{_join_path(self.path, key.strip())} must be a list of strings (got {yaml_type_name(raw)})"
            )

        items: list[str] = []
        for idx, item in enumerate(raw):
            text = _scalar_text(item)
            if text is None:
                raise TypeError(
                    f"{_join_path(self.path, key.strip())}[{idx}] must be a string (got {yaml_type_name(item)})"
                )
            items.append(text)

        if not items and not allow_empty:
            raise ValueError(f"{_join_path(self.path, key.strip())} cannot be empty")
        return items

    def list_namespaces(self, key: str, *, default: list[Any] | object = _MISSING) -> list["ConfigNamespace"]:
        """Read a list of mappings as child namespaces (`key[0]`, `key[1]`, ...)."""

        raw = self._get_raw(key, default=default)
        if raw is None:
            raw = []
        if not isinstance(raw, (list, tuple)):
            raise TypeError(
                f"{_join_path(self.path, key.strip())} must be a list (got {yaml_type_name(raw)})"
            )

        base = key.strip()
        return [self._adopt(f"{base}[{idx}]", item) for idx, item in enumerate(raw)]

    def mapping_namespaces(
        self, key: str, *, default: Mapping[str, Any] | object = _MISSING
    ) -> dict[str, "ConfigNamespace"]:
        """Read a mapping of name -> mapping as named child namespaces."""

        raw = self._get_raw(key, default=default)
        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise TypeError(
                f"{_join_path(self.path, key.strip())} must be a mapping (got {yaml_type_name(raw)})"
            )

        base = key.strip()
        out: dict[str, ConfigNamespace] = {}
        for raw_name, item in raw.items():
            name = _scalar_text(raw_name)
            if name is None or not name.strip():
                raise TypeError(
                    f"{_join_path(self.path, base)} keys must be non-empty strings (got {raw_name!r})"
                )
            out[name] = self._adopt(f"{base}.{name}", item)
        return out
