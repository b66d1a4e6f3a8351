"""
测试公共夹具

- 存储使用 tmp_path 下的 SQLite 文件库（aiosqlite），别名解析的两路并发查询各自拿独立连接
- 接口测试使用 httpx.AsyncClient + ASGITransport，通过 dependency_overrides 注入测试库的会话
"""
# 标准库导包
import os
import sys
from datetime import datetime, timedelta
from pathlib import Path

# 在导入应用配置之前指定测试库，避免连接MySQL
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("POD_ENV", "test")

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# 第三方库导包
import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# 项目内部导包
from storage import models  # noqa: F401
from storage.database import Base, get_session, get_session_factory
from storage.models import Profile, Tag, TagAlias, Topic, TopicTag

BASE_TIME = datetime(2026, 2, 19, 10, 0, 0)


@pytest.fixture
async def engine(tmp_path):
    """每个测试独立的SQLite文件库"""
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


@pytest.fixture
async def session(session_factory):
    async with session_factory() as db_session:
        yield db_session


@pytest.fixture
def seed(session_factory):
    """写入测试数据并提交"""
    async def _seed(*objects):
        async with session_factory() as db_session:
            db_session.add_all(objects)
            await db_session.commit()
    return _seed


def make_tag(tag_id, name, status="approved", **kwargs):
    """构造标签，slug 默认由名称生成"""
    return Tag(
        id=tag_id,
        name=name,
        slug=kwargs.pop("slug", name.lower().replace(" ", "-")),
        status=status,
        featured=kwargs.pop("featured", False),
        icon=kwargs.pop("icon", ""),
        **kwargs
    )


def make_alias(alias_id, tag_id, alias):
    return TagAlias(id=alias_id, tag_id=tag_id, alias=alias, normalized_alias=alias.strip().lower())


def make_topic(topic_id, title, minutes=0, messages_count=1):
    """构造主题，minutes 越大 last_post_at 越新"""
    timestamp = BASE_TIME + timedelta(minutes=minutes)
    return Topic(
        id=topic_id,
        title=title,
        author_id="author",
        messages_count=messages_count,
        created_at=timestamp,
        last_post_at=timestamp
    )


def make_topic_tag(topic_id, tag_id, minutes=0):
    return TopicTag(
        topic_id=topic_id,
        tag_id=tag_id,
        created_by="author",
        created_at=BASE_TIME + timedelta(minutes=minutes)
    )


def make_profile(user_id, legacy_tag_icons_enabled=True, is_admin=False):
    return Profile(
        id=user_id,
        username=user_id,
        legacy_tag_icons_enabled=legacy_tag_icons_enabled,
        is_admin=is_admin
    )


@pytest.fixture
async def client(session_factory):
    """挂在测试库上的接口客户端"""
    from main import app

    async def override_get_session():
        async with session_factory() as db_session:
            try:
                yield db_session
                await db_session.commit()
            except Exception:
                await db_session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as api_client:
        yield api_client

    app.dependency_overrides.clear()
