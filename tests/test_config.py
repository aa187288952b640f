"""Tests for monopack.toml handling."""
import pytest
import toml

from monopack.config import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    GlobalConfig,
    LinkConfig,
    WorkspacesConfig,
)
from monopack.workspace.errors import ConfigError


def test_defaults():
    config = GlobalConfig()

    assert config.verbose is False
    assert config.parallel_jobs == 4
    assert config.workspaces.command == ["yarn", "workspaces", "info", "--json"]
    assert config.link.on_collision == "abort"


def test_default_command_is_not_shared():
    first = GlobalConfig()
    first.workspaces.command.append("--silent")

    assert GlobalConfig().workspaces.command == ["yarn", "workspaces", "info", "--json"]


def test_missing_file_gives_defaults(tmp_path):
    config = GlobalConfig.load(service_root=tmp_path)

    assert config == GlobalConfig()


def test_loads_file_from_service_root(tmp_path):
    (tmp_path / CONFIG_FILENAME).write_text(
        "[monopack]\n"
        "verbose = true\n"
        "parallel_jobs = 2\n"
        "\n"
        "[workspaces]\n"
        'command = ["npm", "query", ".workspace"]\n'
        "\n"
        "[link]\n"
        'on_collision = "ignore"\n'
    )

    config = GlobalConfig.load(service_root=tmp_path)

    assert config.verbose is True
    assert config.parallel_jobs == 2
    assert config.workspaces.command == ["npm", "query", ".workspace"]
    assert config.link.on_collision == "ignore"


def test_partial_file_keeps_other_defaults(tmp_path):
    (tmp_path / CONFIG_FILENAME).write_text('[link]\non_collision = "continue"\n')

    config = GlobalConfig.load(service_root=tmp_path)

    assert config.link.on_collision == "continue"
    assert config.parallel_jobs == 4


def test_env_var_overrides_service_root(tmp_path, monkeypatch):
    (tmp_path / CONFIG_FILENAME).write_text("[monopack]\nparallel_jobs = 2\n")
    other = tmp_path / "elsewhere.toml"
    other.write_text("[monopack]\nparallel_jobs = 8\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(other))

    assert GlobalConfig.load(service_root=tmp_path).parallel_jobs == 8


def test_explicit_path_wins_over_env_var(tmp_path, monkeypatch):
    explicit = tmp_path / "explicit.toml"
    explicit.write_text("[monopack]\nparallel_jobs = 3\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.toml"))

    assert GlobalConfig.load(explicit).parallel_jobs == 3


@pytest.mark.parametrize("content", [
    '[link]\non_collision = "retry"\n',
    "[monopack]\nparallel_jobs = 0\n",
    '[monopack]\nparallel_jobs = "4"\n',
    "[monopack]\nparallel_jobs = true\n",
    '[monopack]\nverbose = "yes"\n',
    "[workspaces]\ncommand = []\n",
    '[workspaces]\ncommand = "yarn workspaces info"\n',
    '[workspaces]\ncommand = ["yarn", ""]\n',
    "monopack = 3\n",
    'link = "abort"\n',
    'workspaces = ["yarn", "workspaces"]\n',
])
def test_invalid_values_raise(tmp_path, content):
    (tmp_path / CONFIG_FILENAME).write_text(content)

    with pytest.raises(ConfigError):
        GlobalConfig.load(service_root=tmp_path)


def test_invalid_toml_raises(tmp_path):
    (tmp_path / CONFIG_FILENAME).write_text("[monopack\nverbose = ")

    with pytest.raises(ConfigError, match="Could not load config"):
        GlobalConfig.load(service_root=tmp_path)


def test_invalid_constructor_arguments_raise():
    with pytest.raises(ConfigError):
        GlobalConfig(link=LinkConfig(on_collision="sometimes"))
    with pytest.raises(ConfigError):
        GlobalConfig(workspaces=WorkspacesConfig(command=[]))


def test_save_and_load(tmp_path):
    config = GlobalConfig(verbose=True, parallel_jobs=6,
                          link=LinkConfig(on_collision="continue"))

    path = config.save(tmp_path / "nested" / CONFIG_FILENAME)

    assert toml.load(path)["monopack"]["parallel_jobs"] == 6
    assert GlobalConfig.load(path) == config
