"""Cached category reads and their invalidation on every mutation."""

import fnmatch
from unittest.mock import patch

import pytest

from marketplace.core.constants import CATEGORY_CACHE_PREFIX
from marketplace.domain.exceptions import CategoryHasChildren
from marketplace.schemas.category_schema import CategorySchema
from marketplace.services.category_service import CategoryService
from marketplace.utils.cache import cache


class InMemoryRedis:
    """The slice of the redis client API the cache uses, backed by a dict."""

    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def set(self, key, value, ex=None):
        self.store[key] = value

    def scan_iter(self, pattern):
        return [key for key in list(self.store) if fnmatch.fnmatch(key, pattern)]

    def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)


@pytest.fixture
def redis_client():
    client = InMemoryRedis()
    with patch.object(cache, "_client", client):
        yield client


@pytest.fixture
def service(uow) -> CategoryService:
    return CategoryService(uow)


def _category_keys(client):
    return [key for key in client.store if key.startswith(CATEGORY_CACHE_PREFIX)]


def _names(service):
    return [c["name"] for c in service.list_flat()]


class TestCachedReads:
    def test_miss_then_hit(self, service, redis_client, sample_tree, make_category):
        categories = service.uow.categories
        with patch.object(categories, "active_ordered", wraps=categories.active_ordered) as reads:
            first = service.list_flat()
            # Inserted behind the service's back, so nothing invalidates
            make_category("Plumbing")
            second = service.list_flat()

        assert reads.call_count == 1
        assert second == first
        assert "Plumbing" not in [c["name"] for c in second]
        assert f"{CATEGORY_CACHE_PREFIX}:flat" in redis_client.store

    def test_admin_tree_keyed_by_arguments(self, service, redis_client, sample_tree, make_category):
        make_category("Hidden", parent=sample_tree["events"], is_active=False)

        active = service.admin_tree()
        everything = service.admin_tree(include_inactive=True)

        assert [n["name"] for n in active[1]["children"]] == ["Catering"]
        assert [n["name"] for n in everything[1]["children"]] == ["Catering", "Hidden"]
        assert f"{CATEGORY_CACHE_PREFIX}:tree:0:None" in redis_client.store
        assert f"{CATEGORY_CACHE_PREFIX}:tree:1:None" in redis_client.store

    def test_disabled_cache_reads_through(self, service, sample_tree, make_category):
        service.list_flat()
        make_category("Plumbing")

        assert "Plumbing" in _names(service)


class TestInvalidation:
    @pytest.fixture
    def primed(self, service, redis_client, sample_tree):
        service.list_flat()
        service.admin_tree()
        assert len(_category_keys(redis_client)) == 2
        return sample_tree

    def test_create(self, service, redis_client, primed):
        service.create(CategorySchema.Create(name="Plumbing"))

        assert _category_keys(redis_client) == []
        assert "Plumbing" in _names(service)

    def test_update(self, service, redis_client, primed):
        service.update(primed["garden"].id, CategorySchema.Update(name="Garden Care"))

        assert _category_keys(redis_client) == []
        names = _names(service)
        assert "Garden Care" in names
        assert "Garden" not in names

    def test_delete(self, service, redis_client, primed):
        service.delete(primed["carpets"].id)

        assert _category_keys(redis_client) == []
        assert "Carpets" not in _names(service)

    def test_clear(self, service, redis_client, primed):
        service.clear()

        assert _category_keys(redis_client) == []
        assert service.list_flat() == []

    def test_failed_mutation_keeps_entries(self, service, redis_client, primed):
        with pytest.raises(CategoryHasChildren):
            service.delete(primed["home"].id)

        assert len(_category_keys(redis_client)) == 2

    def test_other_prefixes_untouched(self, service, redis_client, primed):
        redis_client.store["listings:page:1"] = "[]"

        service.create(CategorySchema.Create(name="Plumbing"))

        assert "listings:page:1" in redis_client.store
