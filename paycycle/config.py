from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Dict

import yaml

DEFAULT_CONFIG: Dict[str, object] = {
    "storage": "json",
    "storage_modules": {
        "json": "paycycle.storage.json_storage.JsonStorage",
        "sqlite": "paycycle.storage.sqlite_storage.SqliteStorage",
    },
    "data_file": "data/transactions.json",
    "db_path": "data/transactions.db",
    "output_modules": {
        "csv": "paycycle.outputs.csv_output.CSVOutput",
        "excel": "paycycle.outputs.excel_output.ExcelOutput",
    },
    "output_dir": "data",
    "report": {
        "include_open_period": False,
    },
    "web": {
        "host": "127.0.0.1",
        "port": 3000,
        "autosave": True,
    },
}

CONFIG_PATH = Path("config.yaml")

# Environment variable -> top-level config key
ENV_OVERRIDES = {
    "PAYCYCLE_DATA_FILE": "data_file",
    "PAYCYCLE_DB_PATH": "db_path",
    "PAYCYCLE_STORAGE": "storage",
}


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def load_config(path: Path | str | None = None) -> Dict[str, object]:
    """Read the YAML config at ``path`` over the defaults, then apply env overrides."""
    target = Path(path) if path else CONFIG_PATH
    data: Dict[str, object] = {}
    if target.exists():
        with target.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
    config = _merge_defaults(data, DEFAULT_CONFIG)

    for env_key, config_key in ENV_OVERRIDES.items():
        value = os.environ.get(env_key)
        if value:
            config[config_key] = value
    return config
