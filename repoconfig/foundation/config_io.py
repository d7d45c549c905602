from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

REPO_CONFIG_FILENAME = "atlantis.yaml"


def find_repo_root(start: str | os.PathLike[str] | None = None) -> str:
    start_path = Path(start or os.getcwd()).resolve()
    if start_path.is_file():
        start_path = start_path.parent

    markers = (REPO_CONFIG_FILENAME, ".git")
    for candidate in (start_path, *start_path.parents):
        if (candidate / REPO_CONFIG_FILENAME).is_file():
            return str(candidate)
        if (candidate / ".git").exists():
            return str(candidate)

    raise FileNotFoundError(
        "Cannot locate repo root: searched from "
        f"{start_path} for {', '.join(markers)}"
    )


def repo_config_path(repo_dir: str | os.PathLike[str]) -> str:
    return os.path.join(os.fspath(repo_dir), REPO_CONFIG_FILENAME)


def read_file_bytes(path: str) -> bytes | None:
    """Return the file contents, or None when the file does not exist.

    Any other OSError (permissions, the path being a directory, ...) is raised.
    """

    try:
        with open(path, "rb") as handle:
            return handle.read()
    except FileNotFoundError:
        return None


class _StrictKeyLoader(yaml.SafeLoader):
    """SafeLoader that rejects a key repeated within one mapping."""

    def construct_mapping(self, node, deep=False):
        seen: set[Any] = set()
        for key_node, _value_node in node.value:
            key = self.construct_object(key_node, deep=deep)
            try:
                duplicate = key in seen
            except TypeError:
                # Unhashable keys are reported by the base constructor.
                continue
            if duplicate:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def load_yaml_mapping(data: bytes | str) -> dict[str, Any]:
    try:
        payload = yaml.load(data, Loader=_StrictKeyLoader)
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid YAML: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValueError("top level must be a YAML mapping")
    return dict(payload)
