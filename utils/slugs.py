"""
slug生成工具
"""
# 标准库导包
import re
import unicodedata

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(value: str, max_length: int = 110) -> str:
    """
    生成URL安全的slug

    先做NFKD分解去掉重音符号，非字母数字字符折叠为单个连字符。
    结果为空（例如纯emoji或中文名称）时返回空字符串，由调用方兜底。
    """
    normalized = unicodedata.normalize("NFKD", value or "")
    ascii_only = normalized.encode("ascii", "ignore").decode("ascii").lower()
    slug = _NON_SLUG_RE.sub("-", ascii_only).strip("-")
    return slug[:max_length].strip("-")
