"""
初始化默认标签及别名的脚本
"""
# 标准库导包
import asyncio
import sys
from pathlib import Path

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# 项目内部导包
from storage import async_session_factory, cleanup_db
from storage.repositories import TagRepository, TagAliasRepository


# 默认标签配置，别名用于搜索时的不同写法
DEFAULT_TAGS = [
    {
        "name": "Announcements",
        "slug": "announcements",
        "icon": "📢",
        "featured": True,
        "aliases": ["news"]
    },
    {
        "name": "Help",
        "slug": "help",
        "icon": "❓",
        "featured": True,
        "aliases": ["support", "question"]
    },
    {
        "name": "Off-topic",
        "slug": "off-topic",
        "icon": "💬",
        "featured": False,
        "aliases": ["offtopic", "ot"]
    },
    {
        "name": "Showcase",
        "slug": "showcase",
        "icon": "",
        "featured": False,
        "aliases": []
    }
]


async def init_default_tags():
    """初始化默认标签（已审核状态）"""
    print("开始初始化默认标签...")

    async with async_session_factory() as session:
        try:
            tag_repo = TagRepository(session)
            alias_repo = TagAliasRepository(session)

            created_count = 0
            skipped_count = 0

            for tag_data in DEFAULT_TAGS:
                # 检查标签是否已存在
                existing_tag = await tag_repo.get_by_slug(tag_data["slug"])

                if existing_tag:
                    print(f"  - 跳过已存在的标签: {tag_data['name']}")
                    skipped_count += 1
                    continue

                # 创建新标签
                tag = await tag_repo.create(
                    name=tag_data["name"],
                    slug=tag_data["slug"],
                    icon=tag_data["icon"],
                    featured=tag_data["featured"],
                    status="approved"
                )
                for alias in tag_data["aliases"]:
                    if await alias_repo.get_by_normalized(alias) is None:
                        await alias_repo.add_alias(tag.id, alias)

                print(f"  ✓ 创建标签: {tag.name} (ID: {tag.id})")
                created_count += 1

            await session.commit()
            print(f"\n完成！创建了 {created_count} 个标签，跳过了 {skipped_count} 个已存在的标签。")
            return 0

        except Exception as e:
            await session.rollback()
            print(f"✗ 初始化失败: {str(e)}")
            import traceback
            traceback.print_exc()
            return 1


async def main():
    """主函数"""
    try:
        exit_code = await init_default_tags()
        return exit_code
    finally:
        # 清理数据库连接
        await cleanup_db()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
