"""
关联字段规范化

存储层返回的关联记录有时是单个对象，有时是只含一个元素的列表。
所有消费关联关系的地方统一通过 first_or_none 取值。
"""
# 标准库导包
from typing import Optional, Sequence, TypeVar, Union

T = TypeVar("T")


def first_or_none(value: Union[T, Sequence[T], None]) -> Optional[T]:
    """取关联值：列表取第一个元素（空列表为None），对象原样返回"""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value
