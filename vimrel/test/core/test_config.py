"""Tests for vimrel.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from vimrel.core.config import (
    DEFAULT_BASE_URL,
    BuilderConfig,
    UploaderConfig,
    load_config_file,
    merge_options,
    read_recipe,
    resolve_builder_config,
    resolve_uploader_config,
)
from vimrel.core.result import Err, Ok


@pytest.fixture
def plugin_dir(tmp_path: Path) -> Path:
    (tmp_path / "plugin").mkdir()
    (tmp_path / "plugin" / "foo.vim").write_text("let loaded_foo = 100\n", encoding="utf-8")
    (tmp_path / "foo.vba").write_bytes(b"archive")
    return tmp_path


class TestLoadConfigFile:
    def test_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text("history_fmt: 'Initial release of %s'\ndry: true\n", encoding="utf-8")

        assert load_config_file(path) == Ok({"history_fmt": "Initial release of %s", "dry": True})

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text("", encoding="utf-8")
        assert load_config_file(path) == Ok({})

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config_file(tmp_path / "nope.yml")
        assert isinstance(result, Err)
        assert "Configuration file not found" in result.error.message

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text("key: [unclosed\n", encoding="utf-8")
        result = load_config_file(path)
        assert isinstance(result, Err)
        assert "Invalid YAML" in result.error.message

    def test_root_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        result = load_config_file(path)
        assert isinstance(result, Err)
        assert result.error.path == path


class TestMergeOptions:
    def test_explicit_values_win(self) -> None:
        merged = merge_options({"name": "foo", "format": "zip"}, {"name": "bar", "format": None})
        assert merged == {"name": "bar", "format": "zip"}

    def test_false_is_explicit(self) -> None:
        assert merge_options({"dry": True}, {"dry": False}) == {"dry": False}


class TestReadRecipe:
    def test_lines(self, tmp_path: Path) -> None:
        recipe = tmp_path / "foo.recipe"
        recipe.write_text("plugin/foo.vim\n\nautoload/foo.vim\n", encoding="utf-8")
        assert read_recipe(recipe) == Ok((Path("plugin/foo.vim"), Path("autoload/foo.vim")))

    def test_not_utf8(self, tmp_path: Path) -> None:
        recipe = tmp_path / "foo.recipe"
        recipe.write_bytes(b"plugin/caf\xe9.vim\n")
        result = read_recipe(recipe)
        assert isinstance(result, Err)
        assert result.error.path == recipe
        assert "Cannot read recipe" in result.error.message


class TestResolveBuilderConfig:
    def test_minimal(self, plugin_dir: Path) -> None:
        result = resolve_builder_config(
            {"dir": plugin_dir, "name": "foo", "files": ["plugin/foo.vim"], "archive": "foo.vba"}
        )
        assert isinstance(result, Ok)
        config = result.value
        assert config.format == "vba"
        assert config.checksum == "md5"
        assert config.command == "default"
        assert config.outfile is None
        assert config.archive == Path("foo.vba")
        assert config.archive_path == plugin_dir / "foo.vba"
        assert config.source_paths == (plugin_dir / "plugin" / "foo.vim",)

    @pytest.mark.parametrize("missing", ["name", "files", "archive"])
    def test_required(self, plugin_dir: Path, missing: str) -> None:
        data: dict[str, object] = {
            "dir": plugin_dir,
            "name": "foo",
            "files": ["plugin/foo.vim"],
            "archive": "foo.vba",
        }
        del data[missing]
        result = resolve_builder_config(data)
        assert isinstance(result, Err)
        assert result.error.message == f"No {missing} given"

    def test_archive_must_exist(self, plugin_dir: Path) -> None:
        result = resolve_builder_config(
            {"dir": plugin_dir, "name": "foo", "files": ["plugin/foo.vim"], "archive": "foo.zip"}
        )
        assert isinstance(result, Err)
        assert "Distribution archive does not exist" in result.error.message

    def test_dir_must_exist(self, tmp_path: Path) -> None:
        result = resolve_builder_config({"dir": tmp_path / "nope", "name": "foo"})
        assert isinstance(result, Err)
        assert "Directory not found" in result.error.message

    def test_invalid_format(self, plugin_dir: Path) -> None:
        result = resolve_builder_config({"dir": plugin_dir, "format": "tar"})
        assert isinstance(result, Err)
        assert "format" in result.error.message

    def test_invalid_ignore_pattern(self, plugin_dir: Path) -> None:
        result = resolve_builder_config({"dir": plugin_dir, "ignore_git_messages_rx": "("})
        assert isinstance(result, Err)
        assert "ignore_git_messages_rx" in result.error.message

    def test_dash_means_stdout(self, plugin_dir: Path) -> None:
        result = resolve_builder_config(
            {
                "dir": plugin_dir,
                "name": "foo",
                "files": ["plugin/foo.vim"],
                "archive": "foo.vba",
                "outfile": "-",
            }
        )
        assert isinstance(result, Ok)
        assert result.value.outfile is None
        assert result.value.outfile_path is None

    def test_recipe_implies_name_archive_and_outfile(self, plugin_dir: Path) -> None:
        (plugin_dir / "vimballs").mkdir()
        (plugin_dir / "vimballs" / "foo.recipe").write_text("plugin/foo.vim\n", encoding="utf-8")
        (plugin_dir / "vimballs" / "foo.zip").write_bytes(b"zip")

        result = resolve_builder_config(
            {"dir": plugin_dir, "recipe": "vimballs/foo.recipe", "format": "zip"}
        )
        assert isinstance(result, Ok)
        config = result.value
        assert config.name == "foo"
        assert config.files == (Path("plugin/foo.vim"),)
        assert config.archive == Path("vimballs/foo.zip")
        assert config.outfile == Path("vimballs/foo.yml")

    def test_unreadable_recipe_is_a_config_error(self, plugin_dir: Path) -> None:
        (plugin_dir / "foo.recipe").write_bytes(b"plugin/caf\xe9.vim\n")
        result = resolve_builder_config({"dir": plugin_dir, "recipe": "foo.recipe"})
        assert isinstance(result, Err)
        assert "Cannot read recipe" in result.error.message

    def test_recipe_keeps_explicit_archive(self, plugin_dir: Path) -> None:
        (plugin_dir / "foo.recipe").write_text("plugin/foo.vim\n", encoding="utf-8")
        result = resolve_builder_config(
            {"dir": plugin_dir, "recipe": "foo.recipe", "archive": "foo.vba", "outfile": "out.yml"}
        )
        assert isinstance(result, Ok)
        assert result.value.archive == Path("foo.vba")
        assert result.value.outfile == Path("out.yml")

    def test_wrong_type(self, plugin_dir: Path) -> None:
        result = resolve_builder_config({"dir": plugin_dir, "name": 42})
        assert isinstance(result, Err)
        assert "'name' must be a string" in result.error.message


class TestBuilderConfig:
    def test_absolute_paths_are_kept(self, tmp_path: Path) -> None:
        config = BuilderConfig(
            name="foo", files=(tmp_path / "a.vim",), archive=tmp_path / "foo.vba", dir=Path("elsewhere")
        )
        assert config.archive_path == tmp_path / "foo.vba"
        assert config.source_paths == (tmp_path / "a.vim",)

    def test_frozen(self) -> None:
        config = BuilderConfig(name="foo", files=(), archive=Path("foo.vba"))
        with pytest.raises(AttributeError):
            config.name = "bar"  # type: ignore[misc]


class TestUploaderConfig:
    def test_defaults(self) -> None:
        config = UploaderConfig()
        assert config.dry is False
        assert config.base_url == DEFAULT_BASE_URL
        assert config.has_credentials is False

    def test_from_dict(self) -> None:
        result = resolve_uploader_config(
            {
                "username": "me",
                "password": 1234,
                "id": 3166,
                "dry": True,
                "base_url": "http://localhost:8000/",
            }
        )
        assert isinstance(result, Ok)
        config = result.value
        assert config.password == "1234"
        assert config.id == "3166"
        assert config.dry is True
        assert config.base_url == "http://localhost:8000"
        assert config.has_credentials is True

    def test_descriptor_defaults(self) -> None:
        config = UploaderConfig(id="1", version="1.00")
        assert config.descriptor_defaults() == {
            "id": "1",
            "version": "1.00",
            "message": None,
            "file": None,
        }

    def test_wrong_type(self) -> None:
        result = resolve_uploader_config({"dry": "yes"})
        assert isinstance(result, Err)
        assert "'dry' must be a boolean" in result.error.message
