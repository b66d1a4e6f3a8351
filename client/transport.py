"""
主题列表请求传输

基于 httpx.AsyncClient 调用 GET /api/topics，非2xx响应和网络错误统一抛出 TopicListingError
"""
# 标准库导包
import logging
from typing import Any, Dict, List, Optional

# 第三方库导包
import httpx

# 项目内部导包
from utils.identifiers import MATCH_ANY

# 配置日志
logger = logging.getLogger(__name__)


class TopicListingError(Exception):
    """主题列表请求失败，可重试"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class TopicListingClient:
    """主题列表接口客户端"""

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        初始化客户端

        Args:
            base_url: 服务地址
            timeout: 请求超时（秒）
            headers: 额外请求头，例如 X-User-Id
            client: 外部传入的 httpx.AsyncClient（测试时可挂 ASGITransport），传入时不负责关闭
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout, headers=headers)

    async def fetch_topics(
        self,
        tag_ids: List[int],
        match: str = MATCH_ANY,
        page: int = 1,
        page_size: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        请求一页主题

        Args:
            tag_ids: 请求的标签ID
            match: any/all，仅在有标签时发送
            page: 页码
            page_size: 每页数量，为空时使用服务端默认值

        Returns:
            接口返回的JSON：{topics, page, page_size, total_count, filter}

        Raises:
            TopicListingError: 网络错误、非2xx响应或响应不是JSON对象
        """
        params: Dict[str, Any] = {"page": page}
        if page_size is not None:
            params["page_size"] = page_size
        if tag_ids:
            params["tag_ids"] = ",".join(str(tag_id) for tag_id in tag_ids)
            params["match"] = match

        try:
            response = await self._client.get("/api/topics", params=params)
        except httpx.HTTPError as e:
            logger.warning(f"主题列表请求失败: {str(e)}")
            raise TopicListingError(f"Topic listing request failed: {str(e)}") from e

        if response.is_error:
            message = _error_message(response)
            logger.warning(f"主题列表请求返回错误: status={response.status_code}, error={message}")
            raise TopicListingError(message, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise TopicListingError("Topic listing response is not valid JSON", response.status_code) from e
        if not isinstance(payload, dict):
            raise TopicListingError("Topic listing response is not an object", response.status_code)
        return payload

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "TopicListingClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def _error_message(response: httpx.Response) -> str:
    """优先取 {"error": ...} 中的消息"""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"Topic listing request failed with status {response.status_code}"
