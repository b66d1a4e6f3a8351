"""
标识符规范化工具

把客户端传入的字符串参数（ID列表、分页数量、布尔开关）解析为安全、有界、去重后的值。
全部为纯函数：非法输入降级为安全默认值，不抛出异常。
"""
# 标准库导包
import re
from typing import Any, Iterable, List, Optional

# 匹配模式
MATCH_ANY = "any"
MATCH_ALL = "all"

# 取字符串开头的整数部分，与宽松的十进制解析一致（"3abc" -> 3，"2.7" -> 2）
_LEADING_INT_RE = re.compile(r"^[+-]?\d+")

# 与 Integer 主键一致的上限，超出的ID不可能存在于存储中
MAX_ID = 2 ** 31 - 1

_TRUE_VALUES = ("true", "1")
_FALSE_VALUES = ("false", "0")


def parse_int_token(token: Any) -> Optional[int]:
    """
    解析单个整数记号

    Args:
        token: 任意值，按其字符串形式解析

    Returns:
        解析出的整数，无法解析时返回None
    """
    if token is None or isinstance(token, bool):
        return None
    match = _LEADING_INT_RE.match(str(token).strip())
    if not match:
        return None
    return int(match.group(0))


def _dedupe_positive(values: Iterable[Any]) -> List[int]:
    """去除非正数、超出存储范围的值与重复值，保留首次出现顺序"""
    result: List[int] = []
    seen = set()
    for value in values:
        parsed = parse_int_token(value)
        if parsed is None or parsed <= 0 or parsed > MAX_ID or parsed in seen:
            continue
        seen.add(parsed)
        result.append(parsed)
    return result


def parse_id_list(raw: Optional[str]) -> List[int]:
    """
    解析逗号分隔的ID列表

    结果本身不设上限，数量限制由使用方查询的limit负责。

    Args:
        raw: 原始查询参数，例如 "1,2,foo,2,-1"

    Returns:
        正整数ID列表，例如 [1, 2]
    """
    if not raw:
        return []
    return _dedupe_positive(raw.split(","))


def parse_id_values(values: Any) -> List[int]:
    """
    解析请求体中的ID数组

    Args:
        values: JSON解析后的值，非列表时视为空

    Returns:
        正整数ID列表
    """
    if not isinstance(values, (list, tuple)):
        return []
    return _dedupe_positive(values)


def parse_positive_int(raw: Any) -> Optional[int]:
    """解析路径中的正整数ID，非法或超出存储范围时返回None"""
    parsed = parse_int_token(raw)
    if parsed is None or parsed <= 0 or parsed > MAX_ID:
        return None
    return parsed


def parse_page(raw: Any) -> int:
    """解析页码，缺失或非法时为1，过大时截断到 MAX_ID"""
    parsed = parse_int_token(raw)
    if parsed is None or parsed <= 0:
        return 1
    return min(parsed, MAX_ID)


def parse_limit(raw: Optional[str], fallback: int = 20, maximum: int = 100) -> int:
    """
    解析返回数量限制

    Args:
        raw: 原始参数
        fallback: 缺失或非法（含≤0）时使用的默认值
        maximum: 上限

    Returns:
        [1, maximum] 区间内的数量
    """
    parsed = parse_int_token(raw)
    if parsed is None or parsed <= 0:
        return fallback
    return min(parsed, maximum)


def parse_boolean(raw: Optional[str]) -> Optional[bool]:
    """
    解析布尔参数

    Returns:
        True/False；无法识别时返回None，调用方应视为"不应用该筛选"而不是False
    """
    if raw is None:
        return None
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def parse_match_mode(raw: Optional[str]) -> str:
    """解析标签匹配模式，只有 all 会被识别，其余均为 any"""
    if (raw or "").strip().lower() == MATCH_ALL:
        return MATCH_ALL
    return MATCH_ANY
