"""测试公共 fixtures.

InMemoryBackend 在内存中实现 IndexBackend 能力集合，用于端到端地验证构建、
切换、恢复和清理流程；RenameOnlyBackend 模拟只支持重命名集合的后端。
"""

import fnmatch
from datetime import datetime, timedelta

import pytest

from indexflow.backends.base import AliasAction, IndexBackend
from indexflow.bulk.models import BulkAction, BulkOperation, BulkResult
from indexflow.exceptions import BackendUnavailableError
from indexflow.indexer import IndexRebuilder
from indexflow.naming import IndexNaming


class InMemoryBackend(IndexBackend):
    """内存索引后端，支持原生别名."""

    supports_aliases = True

    def __init__(self):
        self.indices: dict[str, dict[str, dict]] = {}
        self.aliases: dict[str, set[str]] = {}
        self.calls: list[str] = []
        self.fail_delete: set[str] = set()
        self.fail_bulk_ids: set[str] = set()
        self.fail_bulk = False

    def create_index(self, index_name, mappings=None, settings=None):
        self.calls.append(f"create:{index_name}")
        if index_name in self.indices:
            raise BackendUnavailableError(f"index '{index_name}' already exists")
        self.indices[index_name] = {}

    def bulk(self, operations: list[BulkOperation], refresh=True) -> BulkResult:
        self.calls.append(f"bulk:{len(operations)}")
        if self.fail_bulk:
            raise BackendUnavailableError("bulk request failed")
        result = BulkResult(total=len(operations))
        for op in operations:
            if op.doc_id in self.fail_bulk_ids:
                result.add_error(
                    op.index_name, op.doc_id, "mapper_parsing_exception", "bad doc", 400, op.action
                )
                continue
            docs = self.indices[op.index_name]
            if op.action == BulkAction.DELETE:
                if docs.pop(op.doc_id, None) is not None:
                    result.deleted += 1
            else:
                doc_id = op.doc_id
                if doc_id in docs:
                    result.updated += 1
                else:
                    result.created += 1
                docs[doc_id] = dict(op.source)
            result.success += 1
        return result

    def get_alias_targets(self, alias):
        return sorted(self.aliases.get(alias, set()))

    def update_aliases(self, actions: list[AliasAction]):
        self.calls.append("update_aliases")
        for action in actions:
            if action.index not in self.indices:
                raise BackendUnavailableError(f"index '{action.index}' not found")
        for action in actions:
            bound = self.aliases.setdefault(action.alias, set())
            if action.action == "add":
                bound.add(action.index)
            else:
                bound.discard(action.index)

    def list_indices(self, pattern):
        return [name for name in self.indices if fnmatch.fnmatchcase(name, pattern)]

    def delete_index(self, index_name):
        self.calls.append(f"delete:{index_name}")
        if index_name in self.fail_delete:
            raise BackendUnavailableError(f"cannot delete '{index_name}'")
        if index_name not in self.indices:
            return False
        del self.indices[index_name]
        for bound in self.aliases.values():
            bound.discard(index_name)
        return True

    def copy_index(self, source_index, dest_index):
        self.calls.append(f"copy:{source_index}->{dest_index}")
        docs = self.indices[source_index]
        self.indices[dest_index].update({k: dict(v) for k, v in docs.items()})
        return len(docs)

    def search(self, index_name, text="*", from_=0, size=100):
        names = self.resolve(index_name)
        hits = [
            {"_index": name, "_id": doc_id, "_source": doc}
            for name in names
            for doc_id, doc in self.indices[name].items()
        ]
        return {"hits": {"total": {"value": len(hits)}, "hits": hits[from_ : from_ + size]}}

    def resolve(self, name) -> list[str]:
        """按别名或索引名称解析出实际索引."""
        if name in self.aliases and self.aliases[name]:
            return sorted(self.aliases[name])
        return [name] if name in self.indices else []

    def docs(self, name) -> dict[str, dict]:
        """返回别名或索引中的全部文档."""
        merged: dict[str, dict] = {}
        for index in self.resolve(name):
            merged.update(self.indices[index])
        return merged


class RenameOnlyBackend(InMemoryBackend):
    """内存后端，没有别名，只能重命名集合；别名即活动集合的名称."""

    supports_aliases = False

    def get_alias_targets(self, alias):
        return [alias] if alias in self.indices else []

    def update_aliases(self, actions):
        raise NotImplementedError("rename-only backend")

    def rename_index(self, old_name, new_name):
        self.calls.append(f"rename:{old_name}->{new_name}")
        if old_name not in self.indices:
            raise BackendUnavailableError(f"collection '{old_name}' not found")
        if new_name in self.indices:
            raise BackendUnavailableError(f"collection '{new_name}' already exists")
        self.indices[new_name] = self.indices.pop(old_name)

    def resolve(self, name):
        return [name] if name in self.indices else []


class SteppingClock:
    """每次调用前进固定秒数的时钟."""

    def __init__(self, start: datetime | None = None, step_seconds: int = 60):
        self.current = start or datetime(2026, 10, 18, 14, 5, 9)
        self.step = timedelta(seconds=step_seconds)

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def naming(clock) -> IndexNaming:
    return IndexNaming(now_func=clock)


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def rename_backend() -> RenameOnlyBackend:
    return RenameOnlyBackend()


@pytest.fixture
def rebuilder(backend, naming) -> IndexRebuilder:
    return IndexRebuilder(backend, naming=naming)


@pytest.fixture
def pages():
    """返回构造批次回调的工厂函数."""
    return _pages


def _pages(*batches):
    """构造按 offset 顺序返回批次的回调，最后返回空列表."""
    queue = list(batches)

    def next_batch(offset, config, report):
        return queue.pop(0) if queue else []

    return next_batch
