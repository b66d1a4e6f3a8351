"""
标签图标解析

resolve_tag_icon 是 (标签, 偏好) 的纯函数：偏好以不可变配置对象显式传入，不读取任何全局状态。
"""
# 标准库导包
from typing import Any, Optional

# 第三方库导包
from pydantic import BaseModel, ConfigDict

DEFAULT_TAG_ICON = "🏷️"

ICON_KIND_IMAGE = "image"
ICON_KIND_TEXT = "text"

_IMAGE_PREFIXES = ("/", "http://", "https://")


class IconPreferences(BaseModel):
    """图标显示偏好（来自用户资料）"""
    model_config = ConfigDict(frozen=True)

    legacy_icons_enabled: bool = True
    default_icon: str = DEFAULT_TAG_ICON


class DisplayIcon(BaseModel):
    """解析后的展示图标：image 按图片渲染，text 按文字/emoji渲染"""
    model_config = ConfigDict(frozen=True)

    kind: str
    value: str


def is_image_reference(value: Optional[str]) -> bool:
    """按结构判断是否为图片引用：以 /、http://、https:// 开头"""
    normalized = (value or "").strip().lower()
    return normalized.startswith(_IMAGE_PREFIXES)


def resolve_tag_icon(tag: Any, preferences: IconPreferences) -> str:
    """
    解析标签的展示图标

    Args:
        tag: 具有 icon 与 legacy_icon_path 属性的标签记录
        preferences: 图标偏好

    Returns:
        启用旧版图标且存在旧版路径时返回该路径，否则返回 icon，都没有时返回默认字形
    """
    legacy_icon_path = (getattr(tag, "legacy_icon_path", None) or "").strip()
    icon = (getattr(tag, "icon", None) or "").strip()

    if preferences.legacy_icons_enabled and legacy_icon_path:
        return legacy_icon_path
    return icon or preferences.default_icon


def describe_icon(value: Optional[str], default_icon: str = DEFAULT_TAG_ICON) -> DisplayIcon:
    """把图标字符串转为带类型的展示描述"""
    normalized = (value or "").strip()
    if normalized and is_image_reference(normalized):
        return DisplayIcon(kind=ICON_KIND_IMAGE, value=normalized)
    return DisplayIcon(kind=ICON_KIND_TEXT, value=normalized or default_icon)
