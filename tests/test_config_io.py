from pathlib import Path

import pytest

from repoconfig.foundation.config_io import (
    REPO_CONFIG_FILENAME,
    find_repo_root,
    load_yaml_mapping,
    read_file_bytes,
    repo_config_path,
)


def test_repo_config_path_joins_fixed_filename(tmp_path: Path):
    assert repo_config_path(tmp_path) == str(tmp_path / "atlantis.yaml")
    assert REPO_CONFIG_FILENAME == "atlantis.yaml"


def test_read_file_bytes_missing_returns_none(tmp_path: Path):
    assert read_file_bytes(str(tmp_path / "atlantis.yaml")) is None


def test_read_file_bytes_returns_raw_bytes(tmp_path: Path):
    path = tmp_path / "atlantis.yaml"
    path.write_bytes(b"version: 2\n")
    assert read_file_bytes(str(path)) == b"version: 2\n"


def test_read_file_bytes_other_os_errors_propagate(tmp_path: Path):
    (tmp_path / "atlantis.yaml").mkdir()
    with pytest.raises(OSError):
        read_file_bytes(str(tmp_path / "atlantis.yaml"))


def test_load_yaml_mapping_empty_document_is_empty_mapping():
    assert load_yaml_mapping(b"") == {}
    assert load_yaml_mapping("# only a comment\n") == {}


def test_load_yaml_mapping_rejects_invalid_yaml():
    with pytest.raises(ValueError, match=r"^invalid YAML: "):
        load_yaml_mapping(b"projects: [\n")


def test_load_yaml_mapping_rejects_non_mapping_root():
    with pytest.raises(ValueError, match=r"^top level must be a YAML mapping$"):
        load_yaml_mapping(b"- a\n- b\n")


def test_load_yaml_mapping_rejects_duplicate_keys_at_any_depth():
    with pytest.raises(ValueError, match=r"found duplicate key 'version'"):
        load_yaml_mapping(b"version: 3\nversion: 2\n")
    with pytest.raises(ValueError, match=r"found duplicate key 'workflow'"):
        load_yaml_mapping(b"projects:\n- dir: proj\n  workflow: a\n  workflow: ''\n")

    # The same key in sibling mappings is not a duplicate.
    assert load_yaml_mapping(b"projects:\n- dir: a\n- dir: b\n") == {"projects": [{"dir": "a"}, {"dir": "b"}]}


def test_find_repo_root_prefers_nearest_marker(tmp_path: Path, monkeypatch):
    repo = tmp_path / "repo"
    nested = repo / "modules" / "network"
    nested.mkdir(parents=True)
    (repo / ".git").mkdir()

    assert Path(find_repo_root(nested)).resolve() == repo.resolve()

    (repo / "modules" / "atlantis.yaml").write_text("version: 2\n", encoding="utf-8")
    assert Path(find_repo_root(nested)).resolve() == (repo / "modules").resolve()

    monkeypatch.chdir(nested)
    assert Path(find_repo_root()).resolve() == (repo / "modules").resolve()
