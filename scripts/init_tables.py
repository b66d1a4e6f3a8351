"""
初始化论坛标签系统数据表的脚本
"""
# 标准库导包
import asyncio
import sys
from pathlib import Path

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# 项目内部导包
from storage import init_db, cleanup_db
from storage.database import Base


async def main():
    """主函数"""
    print("开始初始化论坛标签系统数据表...")

    try:
        # 初始化数据库表
        await init_db()
        print("✓ 数据表创建成功！")

        print("\n已创建的数据表：")
        for index, table_name in enumerate(sorted(Base.metadata.tables), start=1):
            print(f"  {index}. {table_name}")

    except Exception as e:
        print(f"✗ 初始化失败: {str(e)}")
        import traceback
        traceback.print_exc()
        return 1

    finally:
        # 清理数据库连接
        await cleanup_db()

    return 0


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
