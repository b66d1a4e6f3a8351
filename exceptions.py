"""
业务异常定义

服务层抛出这些异常，路由层按 status_code 转换为 HTTPException，
最终统一渲染为 {"error": message}。
"""


class TagServiceError(Exception):
    """标签服务异常基类"""

    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(TagServiceError):
    """参数校验失败（非法主题ID、空标签列表等），不会访问存储"""

    status_code = 400


class AuthenticationError(TagServiceError):
    """写操作缺少已认证用户"""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class PermissionDeniedError(TagServiceError):
    """已登录但不是管理员"""

    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class NotFoundError(TagServiceError):
    """记录不存在"""

    status_code = 404


class StorageError(TagServiceError):
    """存储层读写失败，原样透出底层错误信息"""

    status_code = 400
