"""
认证工具
网关完成登录校验后通过 X-User-Id 头传入当前用户，这里只负责读取
"""
# 标准库导包
from typing import Optional

# 第三方库导包
from fastapi import Header

# 项目内部导包
from models import UserInfo


async def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id")
) -> Optional[UserInfo]:
    """
    获取当前用户

    Args:
        x_user_id: X-User-Id header值

    Returns:
        UserInfo对象，未登录时返回None
    """
    user_id = (x_user_id or "").strip()
    if not user_id:
        return None
    return UserInfo(user_id=user_id)

