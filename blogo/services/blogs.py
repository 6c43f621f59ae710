"""
Blog service: posts, ownership rules and likes.
"""

import logging
from typing import List

from blogo.cache import BLOG_LIST_PATTERN
from blogo.config import BLOG_CACHE_TTL_SECONDS
from blogo.entities import Blog, User
from blogo.errors import NotFound, NotOwner
from blogo.repositories import BlogRepository
from blogo.services.caching import CacheAsideService

logger = logging.getLogger(__name__)


class BlogService(CacheAsideService):
    """Orchestrates the blog repository and the cache."""

    def __init__(self, blogs: BlogRepository, cache=None, blog_ttl: int = BLOG_CACHE_TTL_SECONDS):
        super().__init__(cache)
        self.blogs = blogs
        self.blog_ttl = blog_ttl

    def create_blog(self, title: str, description: str, body: str, author_id: int) -> Blog:
        blog = Blog.new(title, description, body, author_id)
        blog.validate()

        self.blogs.create_blog(blog)
        logger.info("User %s created blog %s", author_id, blog.id)

        # A new blog can't be cached yet; only listings are affected.
        self._invalidate("blog listings", self.cache.delete_by_prefix, BLOG_LIST_PATTERN)
        return blog

    def get_by_id(self, blog_id: int) -> Blog:
        return self._read_through(
            "blog",
            blog_id,
            self.cache.get_blog,
            self.blogs.get_blog_by_id,
            self.cache.set_blog,
            self.blog_ttl,
        )

    def get_all(self, limit: int = 20, offset: int = 0) -> List[Blog]:
        return self.blogs.list_blogs(limit, offset)

    def get_by_author(self, author_id: int, limit: int = 20, offset: int = 0) -> List[Blog]:
        return self.blogs.list_blogs_by_author(author_id, limit, offset)

    def update_blog(
        self, blog_id: int, title: str, description: str, body: str, user_id: int
    ) -> Blog:
        """
        Edit a blog owned by ``user_id``.

        Raises:
            NotFound: the blog does not exist (or vanished before the write)
            NotOwner: ``user_id`` is not the author
            InvalidInput: the edited blog has an empty title or body
        """
        blog = self._load_owned(blog_id, user_id)
        blog.update(title, description, body)
        blog.validate()

        if self.blogs.update_blog(blog) == 0:
            raise NotFound("blog", blog_id)
        logger.info("User %s updated blog %s", user_id, blog_id)

        self._invalidate_blog(blog_id, listings=True)
        return blog

    def delete_blog(self, blog_id: int, user_id: int) -> None:
        self._load_owned(blog_id, user_id)

        # The store re-checks the author; zero rows means someone got there first.
        if self.blogs.delete_blog(blog_id, user_id) == 0:
            raise NotFound("blog", blog_id)
        logger.info("User %s deleted blog %s", user_id, blog_id)

        self._invalidate_blog(blog_id, listings=True)

    def like_blog(self, blog_id: int, user_id: int) -> None:
        if self.blogs.create_like(blog_id, user_id):
            logger.info("User %s liked blog %s", user_id, blog_id)
        self._invalidate_blog(blog_id)

    def unlike_blog(self, blog_id: int, user_id: int) -> None:
        if self.blogs.delete_like(blog_id, user_id):
            logger.info("User %s unliked blog %s", user_id, blog_id)
        self._invalidate_blog(blog_id)

    def is_liked_by(self, blog_id: int, user_id: int) -> bool:
        return self.blogs.is_liked(blog_id, user_id)

    def get_blog_likes(self, blog_id: int, limit: int = 20, offset: int = 0) -> List[User]:
        return self.blogs.list_likers(blog_id, limit, offset)

    def _load_owned(self, blog_id: int, user_id: int) -> Blog:
        blog = self.blogs.get_blog_by_id(blog_id)
        if not blog.is_owned_by(user_id):
            raise NotOwner("blog", blog_id)
        return blog

    def _invalidate_blog(self, blog_id: int, listings: bool = False) -> None:
        self._invalidate(f"blog:{blog_id}", self.cache.delete_blog, blog_id)
        if listings:
            self._invalidate("blog listings", self.cache.delete_by_prefix, BLOG_LIST_PATTERN)
