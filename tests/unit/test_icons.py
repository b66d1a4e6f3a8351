"""
标签图标解析测试
"""
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from utils.icons import (
    DEFAULT_TAG_ICON,
    IconPreferences,
    describe_icon,
    is_image_reference,
    resolve_tag_icon,
)


def _tag(icon="", legacy_icon_path=None):
    return SimpleNamespace(icon=icon, legacy_icon_path=legacy_icon_path)


def test_legacy_path_wins_when_enabled():
    tag = _tag(icon="🐍", legacy_icon_path="/icons/python.png")
    assert resolve_tag_icon(tag, IconPreferences(legacy_icons_enabled=True)) == "/icons/python.png"


def test_icon_used_when_legacy_disabled():
    tag = _tag(icon="🐍", legacy_icon_path="/icons/python.png")
    assert resolve_tag_icon(tag, IconPreferences(legacy_icons_enabled=False)) == "🐍"


def test_default_glyph_when_nothing_set():
    assert resolve_tag_icon(_tag(), IconPreferences()) == DEFAULT_TAG_ICON
    assert resolve_tag_icon(_tag(icon="   ", legacy_icon_path="  "), IconPreferences()) == DEFAULT_TAG_ICON


def test_blank_legacy_path_falls_through_to_icon():
    tag = _tag(icon="📢", legacy_icon_path="")
    assert resolve_tag_icon(tag, IconPreferences(legacy_icons_enabled=True)) == "📢"


def test_custom_default_icon():
    assert resolve_tag_icon(_tag(), IconPreferences(default_icon="#")) == "#"


def test_preferences_are_immutable():
    preferences = IconPreferences()
    with pytest.raises(ValidationError):
        preferences.legacy_icons_enabled = False


@pytest.mark.parametrize("value,expected", [
    ("/icons/a.png", True),
    ("https://cdn.example.com/a.png", True),
    ("HTTP://cdn.example.com/a.png", True),
    ("  /icons/a.png", True),
    ("🏷️", False),
    ("icons/a.png", False),
    ("", False),
    (None, False),
])
def test_is_image_reference(value, expected):
    assert is_image_reference(value) is expected


def test_describe_icon():
    assert describe_icon("/icons/a.png").kind == "image"
    text_icon = describe_icon("🐍")
    assert (text_icon.kind, text_icon.value) == ("text", "🐍")
    assert describe_icon("").value == DEFAULT_TAG_ICON
