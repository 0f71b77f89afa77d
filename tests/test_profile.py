import pytest

from pulith.profile import CmdConfig, FrameApi, Profile, ProfileError

PROFILE = """[command]
ls = "{{ 'li' ~ 'st' }}"

[command.script]
hello = "hello.sh"
missing = "nope.sh"
"""


@pytest.fixture
def root(tmp_path):
    base = tmp_path / "pulith"
    (base / "data").mkdir(parents=True)
    (base / "script").mkdir()
    (base / "data" / "vars").write_text('name = "demo"\n')
    (base / "script" / "hello.sh").write_text("echo hi\n")
    (base / "profile").write_text(PROFILE)
    return tmp_path


def test_cmd_config_splits_script_from_aliases():
    cfg = CmdConfig.from_dict({"ls": "list", "script": {"a": "a.sh"}})
    assert cfg.aliases == {"ls": "list"}
    assert cfg.script == {"a": "a.sh"}


def test_cmd_config_requires_script():
    with pytest.raises(ProfileError):
        CmdConfig.from_dict({"ls": "list"})


def test_cmd_config_rejects_non_string_alias():
    with pytest.raises(ProfileError):
        CmdConfig.from_dict({"ls": 3, "script": {}})


def test_profile_requires_command():
    with pytest.raises(ProfileError):
        Profile.from_dict({})


def test_get_data_prefixes_keys(root):
    assert FrameApi(root).get_data() == {".vars.name": "demo"}


def test_get_profile_renders_template(root):
    profile = FrameApi(root).get_profile()
    assert profile.command.aliases == {"ls": "list"}
    assert profile.command.script["hello"] == "hello.sh"


def test_get_cmd_alias(root):
    assert FrameApi(root).get_cmd_alias() == [("ls", "list")]


def test_get_cmd_script_filters_missing(root):
    assert FrameApi(root).get_cmd_script() == [("hello", "hello.sh")]


def test_script_commands(root):
    commands = FrameApi(root).script_commands()
    assert [(c.prog, c.description) for c in commands] == [("hello", "run script hello.sh")]


def test_undefined_variable_is_error(root):
    (root / "pulith" / "profile").write_text('[command]\nx = "{{ nothing }}"\n[command.script]\n')
    with pytest.raises(ProfileError):
        FrameApi(root).get_profile()


def test_missing_profile_is_error(root):
    (root / "pulith" / "profile").unlink()
    with pytest.raises(ProfileError):
        FrameApi(root).get_profile()


def test_get_config_missing_is_empty(root):
    assert FrameApi(root).get_config() == {}


def test_get_config_reads_toml(root):
    (root / "pulith" / "config").write_text('proxy = "http://localhost:8080"\n')
    assert FrameApi(root).get_config() == {"proxy": "http://localhost:8080"}


def test_invalid_data_file_is_error(root):
    (root / "pulith" / "data" / "broken").write_text("= nope")
    with pytest.raises(ProfileError):
        FrameApi(root).get_data()