from pathlib import Path

import pytest
import yaml

from myframe import config as config_module
from myframe.config import (
    DEFAULT_CONFIG,
    display_config_from_dict,
    get_config_path,
    load_config,
    write_default_config,
)
from myframe.models import DisplayConfig


def test_display_config_defaults() -> None:
    config = display_config_from_dict(None)

    assert config == DisplayConfig()
    assert config.thickness == 40
    assert config.alignment == "center"
    assert config.show_location is False


def test_display_config_clamps_and_falls_back() -> None:
    config = display_config_from_dict(
        {
            "thickness": 500,
            "alignment": "justify",
            "date_format": "yyyy/mm/dd",
            "round_corners": "yes",
            "show_maker": False,
        }
    )

    assert config.thickness == 100
    assert config.alignment == "center"
    assert config.date_format == "YYYY.MM.DD"
    assert config.round_corners is True
    assert config.show_maker is False
    assert display_config_from_dict({"thickness": 1}).thickness == 10
    assert display_config_from_dict({"date_format": "dd.mm.yyyy"}).date_format == "DD.MM.YYYY"


def test_display_config_rejects_bad_colors() -> None:
    with pytest.raises(ValueError, match="color"):
        display_config_from_dict({"color": "not-a-color"})
    with pytest.raises(ValueError, match="thickness"):
        display_config_from_dict({"thickness": "thick"})


def test_display_config_is_immutable() -> None:
    config = DisplayConfig()
    changed = config.replace(thickness=60)

    assert config.thickness == 40
    assert changed.thickness == 60
    with pytest.raises(AttributeError):
        config.thickness = 80  # type: ignore[misc]


def test_load_config_merges_yaml_over_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump({"display": {"color": "#111111", "round_corners": True}, "jobs": 3}),
        encoding="utf-8",
    )

    cfg = load_config(path)

    assert cfg["jobs"] == 3
    assert cfg["display"]["color"] == "#111111"
    assert cfg["display"]["thickness"] == DEFAULT_CONFIG["display"]["thickness"]
    assert display_config_from_dict(cfg["display"]).round_corners is True


def test_write_default_config_does_not_overwrite(tmp_path: Path) -> None:
    path = tmp_path / "Config" / "config.yaml"

    assert write_default_config(path) == path
    path.write_text("jobs: 7\n", encoding="utf-8")
    write_default_config(path)
    assert load_config(path)["jobs"] == 7

    write_default_config(path, force=True)
    assert load_config(path)["name_template"] == "MyFrame_{stem}.{ext}"


def test_config_path_lives_in_user_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module.platform, "system", lambda: "Linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    path = get_config_path()

    assert path == tmp_path / "MyFrame" / "Config" / "config.yaml"
    install_root = Path(config_module.__file__).resolve().parent.parent
    assert install_root not in path.parents


def test_config_path_on_windows_uses_appdata(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module.platform, "system", lambda: "Windows")
    monkeypatch.setenv("APPDATA", str(tmp_path))

    assert get_config_path() == tmp_path / "MyFrame" / "Config" / "config.yaml"
