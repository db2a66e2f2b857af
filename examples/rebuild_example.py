"""零停机索引重建使用示例.

本文件展示了如何使用 IndexRebuilder 在后台构建新索引、切换别名、回滚和列出备份。
运行前请设置 ELASTICSEARCH_URL 环境变量。
"""

import logging

from indexflow import (
    ConnectionConfig,
    ElasticsearchBackend,
    ESClientFactory,
    IndexerConfig,
    IndexRebuilder,
    RestoreConfig,
)

logging.basicConfig(level=logging.INFO)

# 模拟上游数据源
ARTICLES = [
    {"id": 1, "title": "Elasticsearch 别名入门"},
    {"id": 2, "title": "蓝绿部署"},
    {"id": 3, "title": "已下线的文章", "deleted": True},
    {"id": 4, "title": "索引生命周期"},
]

PAGE_SIZE = 2

MAPPINGS = {
    "properties": {
        "id": {"type": "integer"},
        "title": {"type": "text"},
    }
}


def next_batch(offset, config, report):
    """按 offset 分页读取上游数据，返回空列表表示读取完毕."""
    return ARTICLES[offset : offset + PAGE_SIZE]


def check_index(config, report):
    """上线前校验：候选索引中应有 3 篇文章."""
    total = rebuilder.search(config.index_name)["hits"]["total"]["value"]
    return total == 3


# ==================== 示例1：全量重建 ====================
def example_build():
    config = IndexerConfig(alias="articles", mappings=MAPPINGS, keep_count=2)
    report = rebuilder.build(config, next_batch, test_callback=check_index)

    print("构建结果:")
    for key, value in report.to_dict().items():
        print(f"  {key}: {value}")
    return report


# ==================== 示例2：增量构建（clone） ====================
def example_clone():
    config = IndexerConfig(alias="articles", mode="clone")
    report = rebuilder.build(
        config, lambda offset, config, report: [] if offset else [{"id": 5, "title": "新文章"}]
    )
    print(f"clone 构建: index={report.using_index}, succeeded={report.succeeded}")
    return report


# ==================== 示例3：列出备份与回滚 ====================
def example_restore():
    listing = rebuilder.list_backups("articles")
    print(f"备份列表: {listing.to_dict()}")

    restored = rebuilder.restore(RestoreConfig(alias="articles", backup_ordinal=1))
    print(f"回滚到最近的备份: {restored}")


def main():
    example_build()
    example_clone()
    example_restore()


if __name__ == "__main__":
    with ESClientFactory(ConnectionConfig.from_env()) as factory:
        rebuilder = IndexRebuilder(ElasticsearchBackend(factory.get_client()))
        main()
