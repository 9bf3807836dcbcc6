"""Tests for settings loading, palettes and session wiring."""

import json

import pytest

from difficulty import ConfigurationError
from palettes import PALETTE_NAMES, PALETTES, get_palette
from session import SessionPhase
from settings import GameSettings, build_session, load_settings


def test_defaults_when_file_missing(tmp_path):
    settings = load_settings(tmp_path / "settings.json")
    assert settings == GameSettings()
    assert settings.get_window_size() == (1280, 720)


def test_overrides_and_unknown_keys(tmp_path, caplog):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"palette_name": "Neon", "seed": 5, "volume": 11}), encoding="utf-8")

    settings = load_settings(path)
    assert settings.palette_name == "Neon"
    assert settings.seed == 5
    assert "Ignoring unknown setting 'volume'" in caplog.text


def test_mistyped_values_keep_defaults(tmp_path, caplog):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"countdown": "3", "fullscreen": "yes", "seed": 1.5, "safety_margin": True}),
        encoding="utf-8",
    )

    settings = load_settings(path)
    assert settings.countdown == 3.0
    assert settings.fullscreen is False
    assert settings.seed is None
    assert settings.safety_margin == 2.0
    assert "Ignoring setting 'countdown'" in caplog.text


def test_whole_numbers_accepted_for_float_settings(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"countdown": 5, "start_level": 12, "layouts_dir": None, "fullscreen": True}),
        encoding="utf-8",
    )

    settings = load_settings(path)
    assert settings.countdown == 5.0
    assert isinstance(settings.countdown, float)
    assert settings.start_level == 12
    assert settings.fullscreen is True


def test_unknown_palette_falls_back(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"palette_name": "Plaid"}), encoding="utf-8")
    assert load_settings(path).palette_name == "Classic"


def test_unreadable_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("not json", encoding="utf-8")
    assert load_settings(path) == GameSettings()


def test_build_session_plays_default_tiers(tmp_path):
    settings = GameSettings(seed=11, countdown=0.0)
    controller = build_session(settings, save_dir=tmp_path)

    controller.start_session(start_level=13)
    assert controller.phase == SessionPhase.PUZZLE_ACTIVE
    assert controller.config.tier_name == "medium"
    assert controller.puzzle.node_count == 5
    assert controller.progress.total_levels == 60


def test_build_session_rejects_bad_tier_file(tmp_path):
    path = tmp_path / "tiers.json"
    path.write_text(json.dumps({"tiers": []}), encoding="utf-8")
    with pytest.raises(ConfigurationError):
        build_session(GameSettings(tiers_file=str(path)))


def test_build_session_from_layout_directory(tmp_path):
    controller = build_session(GameSettings(layouts_dir=str(tmp_path / "none"), countdown=0.0))
    controller.start_session()
    assert controller.puzzle is None
    assert controller.last_error is not None


class TestPalettes:
    def test_prefix_of_palette(self):
        assert get_palette("Classic", 2) == PALETTES["Classic"][:2]

    def test_every_palette_covers_default_tiers(self):
        for name in PALETTE_NAMES:
            assert len(get_palette(name, 4)) == 4

    def test_random_palette(self):
        assert get_palette("Random", 3)

    def test_unknown_palette(self):
        with pytest.raises(ValueError):
            get_palette("Plaid", 2)

    def test_too_many_colors(self):
        with pytest.raises(ValueError):
            get_palette("Classic", 9)
