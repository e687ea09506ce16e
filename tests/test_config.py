import json
from pathlib import Path

import pytest

from hexbot.config import Config, load_config
from hexbot.config.models import ServoPose

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"


def test_shipped_config_loads():
    config = load_config(CONFIG_DIR / "hexbot.yaml")

    assert isinstance(config, Config)
    assert config.serial.baudrate == 115200
    assert config.control.initial_speed == 50
    assert config.control.startup_pose[0] == ServoPose(channel=6, pulse=1000)
    assert config.sequence.resolved_path() == (CONFIG_DIR / "sequence.yaml").resolve()


def test_missing_sections_use_defaults(tmp_path):
    path = tmp_path / "hexbot.json"
    path.write_text(json.dumps({"serial": {"port": "/dev/ttyACM0"}}), encoding="utf-8")

    config = load_config(path)

    assert config.serial.port == "/dev/ttyACM0"
    assert config.sequence.filepath is None
    assert len(config.control.startup_pose) == 6


def test_relative_paths_follow_config_file(tmp_path):
    path = tmp_path / "hexbot.yaml"
    path.write_text("sequence:\n  filepath: gait.yaml\nlogging:\n  filepath: logs/out.log\n", encoding="utf-8")

    config = load_config(path)

    assert config.sequence.filepath == (tmp_path / "gait.yaml").resolve()
    assert config.logging.resolved_path() == (tmp_path / "logs" / "out.log").resolve()


def test_bad_startup_pose(tmp_path):
    path = tmp_path / "hexbot.yaml"
    path.write_text("control:\n  startup_pose:\n    - {channel: 1}\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(path)


def test_unknown_key_is_rejected(tmp_path):
    path = tmp_path / "hexbot.yaml"
    path.write_text("serial:\n  speed: 3\n", encoding="utf-8")

    with pytest.raises(TypeError):
        load_config(path)


def test_unsupported_format(tmp_path):
    path = tmp_path / "hexbot.ini"
    path.write_text("[serial]\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")
