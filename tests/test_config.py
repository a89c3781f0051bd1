import yaml

from paycycle import config as config_module
from paycycle.config import DEFAULT_CONFIG, load_config


def test_missing_file_returns_defaults(tmp_path):
    cfg = load_config(tmp_path / "missing.yaml")
    assert cfg == DEFAULT_CONFIG
    cfg["web"]["port"] = 1
    assert DEFAULT_CONFIG["web"]["port"] == 3000


def test_file_values_merge_over_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(
            {"storage": "sqlite", "report": {"include_open_period": True}, "web": {"port": 8080}},
            f,
        )
    cfg = load_config(path)
    assert cfg["storage"] == "sqlite"
    assert cfg["report"]["include_open_period"] is True
    assert cfg["web"] == {"host": "127.0.0.1", "port": 8080, "autosave": True}
    assert cfg["storage_modules"] == DEFAULT_CONFIG["storage_modules"]


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("PAYCYCLE_DATA_FILE", str(tmp_path / "env.json"))
    monkeypatch.setenv("PAYCYCLE_STORAGE", "sqlite")
    cfg = load_config(tmp_path / "missing.yaml")
    assert cfg["data_file"] == str(tmp_path / "env.json")
    assert cfg["storage"] == "sqlite"


def test_default_path(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("output_dir: reports\n")
    monkeypatch.setattr(config_module, "CONFIG_PATH", path)
    assert load_config()["output_dir"] == "reports"


def test_create_store_uses_configured_flag(tmp_path):
    from paycycle.store import create_store

    cfg = load_config(tmp_path / "missing.yaml")
    cfg["data_file"] = str(tmp_path / "t.json")
    cfg["report"]["include_open_period"] = True
    store = create_store(cfg)
    assert store.include_open_period is True
    assert store.storage.path == tmp_path / "t.json"
