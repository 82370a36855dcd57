# tests/test_config_loader.py
from pathlib import Path

from common.config_loader import ProfileSettings, cfg_get, load_config

REPO_ROOT = Path(__file__).resolve().parents[1]


def test_cfg_get_dotted_paths():
    cfg = {"storage": {"image_prefix": "avatars"}}
    assert cfg_get(cfg, "storage.image_prefix") == "avatars"
    assert cfg_get(cfg, "storage.missing", "x") == "x"
    assert cfg_get(cfg, "storage.image_prefix.deeper", 1) == 1


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(str(tmp_path / "nope.yaml")) == {}
    assert ProfileSettings.from_config({}) == ProfileSettings()


def test_broken_yaml_gives_defaults(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text("storage: [unclosed\n", encoding="utf-8")
    assert load_config(str(p)) == {}


def test_repo_config_matches_defaults():
    assert ProfileSettings.from_config(load_config(str(REPO_ROOT / "config.yaml"))) == ProfileSettings()


def test_settings_from_config():
    s = ProfileSettings.from_config({
        "storage": {"image_prefix": "/avatars/"},
        "routes": {"after_save": "/home", "delete_request": "/account/delete"},
        "ui": {"notify_services_failure": True},
    })
    assert s.image_prefix == "avatars"
    assert s.after_save_route == "/home"
    assert s.delete_request_route == "/account/delete"
    assert s.notify_services_failure is True
