from pathlib import Path

from pulith.paths import PulithEnv, Store


def test_store_layout(tmp_path):
    store = Store.from_root(tmp_path)
    assert store.root == tmp_path
    assert store.bin == tmp_path / "bin"
    assert store.cache == tmp_path / "cache"
    assert store.temp == tmp_path / "temp"


def test_store_accepts_string():
    assert Store.from_root("/srv/pulith").bin == Path("/srv/pulith") / "bin"


def test_env_uses_pulith_root(monkeypatch, tmp_path):
    root = tmp_path / "custom-root"
    monkeypatch.setenv("PULITH_ROOT", str(root))
    monkeypatch.chdir(tmp_path)
    env = PulithEnv.from_environment()
    assert env.store == Store.from_root(root)
    assert env.pwd.resolve() == tmp_path.resolve()


def test_env_defaults_to_home(monkeypatch, tmp_path):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.delenv("PULITH_ROOT", raising=False)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    env = PulithEnv.from_environment()
    assert env.home == home
    assert env.store.root == home / ".pulith"
    assert env.store.bin == home / ".pulith" / "bin"