"""Tests for the blog service: ownership, likes and cache invalidation."""

from unittest.mock import MagicMock

import pytest

from blogo.entities import Blog
from blogo.errors import InvalidInput, NotFound, NotOwner, StoreError
from blogo.services.blogs import BlogService
from blogo.services.users import UserService


@pytest.fixture
def users(user_repo, cache):
    return UserService(user_repo, cache=cache)


@pytest.fixture
def service(blog_repo, cache):
    return BlogService(blog_repo, cache=cache, blog_ttl=600)


@pytest.fixture
def alice(users):
    return users.register("alice", "alice@example.com", "Alice").user


@pytest.fixture
def bob(users):
    return users.register("bob", "bob@example.com", "Bob").user


class TestCreate:

    def test_create_and_get(self, service, alice):
        blog = service.create_blog("Hello", "first post", "Body text", alice.id)

        fetched = service.get_by_id(blog.id)
        assert fetched.title == "Hello"
        assert fetched.author_id == alice.id
        assert fetched.author.username == "alice"
        assert fetched.likes_count == 0

    def test_create_drops_listings_only(self, service, alice, redis_double):
        redis_double.store["blogs:page:0"] = "[]"
        redis_double.store["user:99"] = "{}"

        service.create_blog("Hello", "", "Body", alice.id)
        assert "blogs:page:0" not in redis_double.store
        assert "user:99" in redis_double.store

    def test_invalid_blog_never_reaches_store(self):
        repo = MagicMock()
        service = BlogService(repo)
        with pytest.raises(InvalidInput):
            service.create_blog("", "", "Body", 1)
        with pytest.raises(InvalidInput):
            service.create_blog("Title", "", "", 1)
        with pytest.raises(InvalidInput):
            service.create_blog("Title", "", "Body", 0)
        repo.create_blog.assert_not_called()

    def test_unknown_author(self, service):
        with pytest.raises(NotFound):
            service.create_blog("Title", "", "Body", 404)


class TestReadThrough:

    def test_get_fills_cache_with_ttl(self, service, alice, redis_double):
        blog = service.create_blog("Hello", "", "Body", alice.id)
        assert f"blog:{blog.id}" not in redis_double.store

        service.get_by_id(blog.id)
        assert redis_double.ttls[f"blog:{blog.id}"] == 600

    def test_cached_blog_survives_store_outage(self, service, alice):
        blog = service.create_blog("Hello", "", "Body", alice.id)
        service.get_by_id(blog.id)

        service.blogs = MagicMock()
        service.blogs.get_blog_by_id.side_effect = StoreError("get blog", Exception("down"))
        assert service.get_by_id(blog.id).title == "Hello"

    def test_cache_outage_falls_back_to_store(self, service, alice, redis_double):
        blog = service.create_blog("Hello", "", "Body", alice.id)
        redis_double.failing = True
        assert service.get_by_id(blog.id).title == "Hello"

    def test_missing_blog(self, service):
        with pytest.raises(NotFound):
            service.get_by_id(404)


class TestOwnership:

    def test_owner_can_update(self, service, alice, redis_double):
        blog = service.create_blog("Hello", "", "Body", alice.id)
        service.get_by_id(blog.id)
        redis_double.store["blogs:page:0"] = "[]"

        updated = service.update_blog(blog.id, "Hello again", "edited", "New body", alice.id)
        assert updated.title == "Hello again"
        assert f"blog:{blog.id}" not in redis_double.store
        assert "blogs:page:0" not in redis_double.store
        assert service.get_by_id(blog.id).body == "New body"

    def test_non_owner_cannot_update(self, service, alice, bob):
        blog = service.create_blog("Hello", "", "Body", alice.id)

        with pytest.raises(NotOwner):
            service.update_blog(blog.id, "Hijacked", "", "Hijacked", bob.id)
        assert service.get_by_id(blog.id).title == "Hello"

    def test_update_with_empty_title(self, service, alice):
        blog = service.create_blog("Hello", "", "Body", alice.id)
        with pytest.raises(InvalidInput):
            service.update_blog(blog.id, "", "", "Body", alice.id)

    def test_update_missing_blog(self, service, alice):
        with pytest.raises(NotFound):
            service.update_blog(404, "t", "", "b", alice.id)

    def test_owner_delete_invalidates_cached_copy(self, service, alice):
        blog = service.create_blog("Hello", "", "Body", alice.id)
        service.get_by_id(blog.id)

        service.delete_blog(blog.id, alice.id)
        with pytest.raises(NotFound):
            service.get_by_id(blog.id)

    def test_non_owner_cannot_delete(self, service, alice, bob):
        blog = service.create_blog("Hello", "", "Body", alice.id)
        with pytest.raises(NotOwner):
            service.delete_blog(blog.id, bob.id)
        assert service.get_by_id(blog.id).id == blog.id

    def test_delete_race_is_not_found(self):
        repo = MagicMock()
        repo.get_blog_by_id.return_value = Blog(
            id=7, title="t", description="", body="b", author_id=1
        )
        repo.delete_blog.return_value = 0
        cache = MagicMock()
        service = BlogService(repo, cache=cache)

        with pytest.raises(NotFound):
            service.delete_blog(7, 1)
        repo.delete_blog.assert_called_once_with(7, 1)
        cache.delete_blog.assert_not_called()

    def test_update_race_is_not_found(self):
        repo = MagicMock()
        repo.get_blog_by_id.return_value = Blog(
            id=7, title="t", description="", body="b", author_id=1
        )
        repo.update_blog.return_value = 0
        service = BlogService(repo)

        with pytest.raises(NotFound):
            service.update_blog(7, "t2", "", "b2", 1)


class TestLikes:

    def test_like_twice_counts_once(self, service, alice, bob):
        blog = service.create_blog("Hello", "", "Body", alice.id)
        service.get_by_id(blog.id)

        service.like_blog(blog.id, bob.id)
        service.like_blog(blog.id, bob.id)
        assert service.get_by_id(blog.id).likes_count == 1
        assert service.is_liked_by(blog.id, bob.id)

        service.unlike_blog(blog.id, bob.id)
        service.unlike_blog(blog.id, bob.id)
        assert service.get_by_id(blog.id).likes_count == 0
        assert not service.is_liked_by(blog.id, bob.id)

    def test_like_keeps_listings(self, service, alice, bob, redis_double):
        blog = service.create_blog("Hello", "", "Body", alice.id)
        redis_double.store["blogs:page:0"] = "[]"

        service.like_blog(blog.id, bob.id)
        assert "blogs:page:0" in redis_double.store

    def test_like_missing_blog(self, service, bob):
        with pytest.raises(NotFound):
            service.like_blog(404, bob.id)

    def test_blog_likes_page(self, service, alice, bob):
        blog = service.create_blog("Hello", "", "Body", alice.id)
        service.like_blog(blog.id, alice.id)
        service.like_blog(blog.id, bob.id)

        assert [u.username for u in service.get_blog_likes(blog.id)] == ["bob", "alice"]
        assert [u.username for u in service.get_blog_likes(blog.id, limit=1)] == ["bob"]


class TestListings:

    def test_get_all_and_by_author(self, service, alice, bob):
        first = service.create_blog("A1", "", "Body", alice.id)
        second = service.create_blog("B1", "", "Body", bob.id)
        third = service.create_blog("A2", "", "Body", alice.id)

        assert [b.id for b in service.get_all()] == [third.id, second.id, first.id]
        assert [b.id for b in service.get_all(limit=1, offset=1)] == [second.id]
        assert [b.id for b in service.get_by_author(alice.id)] == [third.id, first.id]
        assert service.get_by_author(bob.id, offset=5) == []
