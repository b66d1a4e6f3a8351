"""
错误转换工具
把服务层异常统一转换为HTTPException，并提供全局的 {"error": message} 渲染
"""
# 标准库导包
import logging

# 第三方库导包
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

# 项目内部导包
from exceptions import TagServiceError

# 配置日志
logger = logging.getLogger(__name__)


def storage_error_message(error: SQLAlchemyError) -> str:
    """取底层驱动的原始错误信息"""
    return str(getattr(error, "orig", None) or error)


def to_http_exception(error: Exception, action: str) -> HTTPException:
    """
    把异常转换为HTTPException

    - 业务异常：使用其 status_code 和消息
    - 存储异常：400，原样透出底层错误信息
    - 其他异常：500

    Args:
        error: 捕获到的异常
        action: 操作描述，用于日志

    Returns:
        HTTPException实例（由调用方raise）
    """
    if isinstance(error, HTTPException):
        return error
    if isinstance(error, TagServiceError):
        if error.status_code >= 500:
            logger.error(f"{action}: {error.message}")
        return HTTPException(status_code=error.status_code, detail=error.message)
    if isinstance(error, SQLAlchemyError):
        message = storage_error_message(error)
        logger.error(f"{action}: {message}")
        return HTTPException(status_code=400, detail=message)

    logger.error(f"{action}: {str(error)}")
    return HTTPException(status_code=500, detail=f"{action}: {str(error)}")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """所有HTTP错误统一渲染为 {"error": message}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """请求参数校验失败统一返回400"""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """注册全局异常处理器"""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
