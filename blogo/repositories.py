"""
SQLAlchemy repositories: the durable store for users, blogs, follows and likes.

Every public method is one unit of work in its own session. Reads are retried
on transient connection errors; any other database failure surfaces as
``StoreError``.
"""

import functools
import logging
from typing import Callable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from blogo import models
from blogo.db import db_retry, get_session
from blogo.entities import Blog, User, UserStats
from blogo.errors import Conflict, NotFound, StoreError

logger = logging.getLogger(__name__)


def store_operation(name: str):
    """Translate raw SQLAlchemy failures into StoreError."""

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except SQLAlchemyError as e:
                logger.error("Store operation %r failed: %s", name, e)
                raise StoreError(name, e) from e

        return wrapper

    return decorator


def to_user(row: models.User) -> User:
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        display_name=row.display_name,
        bio=row.bio or "",
        profile_image=row.profile_image or "",
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def to_blog(row: models.Blog, author: Optional[models.User] = None, likes_count: int = 0) -> Blog:
    return Blog(
        id=row.id,
        title=row.title,
        description=row.description or "",
        body=row.body,
        author_id=row.author_id,
        author=to_user(author) if author is not None else None,
        likes_count=likes_count or 0,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class UserRepository:
    """Users and the follow graph."""

    def __init__(self, session_factory: Callable = get_session):
        self._session = session_factory

    @store_operation("create user")
    def create_user(self, user: User) -> User:
        """Insert a user and assign its id. Duplicate username/email raise Conflict."""
        try:
            with self._session() as db:
                row = models.User(
                    username=user.username,
                    email=user.email,
                    display_name=user.display_name,
                    bio=user.bio,
                    profile_image=user.profile_image,
                    created_at=user.created_at,
                    updated_at=user.updated_at,
                )
                db.add(row)
                db.flush()
                user.id = row.id
        except IntegrityError as e:
            raise Conflict(f"user '{user.username}' or email '{user.email}' already exists") from e
        return user

    @store_operation("get user by id")
    @db_retry
    def get_user_by_id(self, user_id: int) -> User:
        with self._session() as db:
            row = db.get(models.User, user_id)
            if row is None:
                raise NotFound("user", user_id)
            return to_user(row)

    @store_operation("get user by username")
    @db_retry
    def get_user_by_username(self, username: str) -> User:
        with self._session() as db:
            row = db.query(models.User).filter(models.User.username == username).first()
            if row is None:
                raise NotFound("user", username)
            return to_user(row)

    @store_operation("update user")
    def update_user(self, user: User) -> None:
        with self._session() as db:
            updated = (
                db.query(models.User)
                .filter(models.User.id == user.id)
                .update(
                    {
                        "display_name": user.display_name,
                        "bio": user.bio,
                        "profile_image": user.profile_image,
                        "updated_at": user.updated_at,
                    },
                    synchronize_session=False,
                )
            )
            if updated == 0:
                raise NotFound("user", user.id)

    @store_operation("follow user")
    def create_follow(self, follower_id: int, following_id: int) -> bool:
        """Create the follow edge. Returns False if it already existed."""
        try:
            with self._session() as db:
                for uid in (follower_id, following_id):
                    if db.get(models.User, uid) is None:
                        raise NotFound("user", uid)

                existing = (
                    db.query(models.Follow.id)
                    .filter(
                        models.Follow.follower_id == follower_id,
                        models.Follow.following_id == following_id,
                    )
                    .first()
                )
                if existing:
                    return False

                db.add(models.Follow(follower_id=follower_id, following_id=following_id))
                db.flush()
                return True
        except IntegrityError:
            # Lost a race against an identical follow.
            return False

    @store_operation("unfollow user")
    def delete_follow(self, follower_id: int, following_id: int) -> bool:
        """Remove the follow edge. Returns False if there was none."""
        with self._session() as db:
            deleted = (
                db.query(models.Follow)
                .filter(
                    models.Follow.follower_id == follower_id,
                    models.Follow.following_id == following_id,
                )
                .delete(synchronize_session=False)
            )
            return deleted > 0

    @store_operation("list followers")
    @db_retry
    def list_followers(self, user_id: int, limit: int, offset: int) -> List[User]:
        """Users following ``user_id``, most recent follow first."""
        with self._session() as db:
            rows = (
                db.query(models.User)
                .join(models.Follow, models.Follow.follower_id == models.User.id)
                .filter(models.Follow.following_id == user_id)
                .order_by(models.Follow.created_at.desc(), models.Follow.id.desc())
                .limit(limit)
                .offset(offset)
                .all()
            )
            return [to_user(row) for row in rows]

    @store_operation("list following")
    @db_retry
    def list_following(self, user_id: int, limit: int, offset: int) -> List[User]:
        """Users that ``user_id`` follows, most recent follow first."""
        with self._session() as db:
            rows = (
                db.query(models.User)
                .join(models.Follow, models.Follow.following_id == models.User.id)
                .filter(models.Follow.follower_id == user_id)
                .order_by(models.Follow.created_at.desc(), models.Follow.id.desc())
                .limit(limit)
                .offset(offset)
                .all()
            )
            return [to_user(row) for row in rows]

    @store_operation("check follow")
    @db_retry
    def is_following(self, follower_id: int, following_id: int) -> bool:
        with self._session() as db:
            return (
                db.query(models.Follow.id)
                .filter(
                    models.Follow.follower_id == follower_id,
                    models.Follow.following_id == following_id,
                )
                .first()
                is not None
            )

    @store_operation("get user stats")
    @db_retry
    def get_user_stats(self, user_id: int) -> UserStats:
        with self._session() as db:
            followers = (
                db.query(func.count(models.Follow.id))
                .filter(models.Follow.following_id == user_id)
                .scalar()
            )
            following = (
                db.query(func.count(models.Follow.id))
                .filter(models.Follow.follower_id == user_id)
                .scalar()
            )
            blogs = (
                db.query(func.count(models.Blog.id))
                .filter(models.Blog.author_id == user_id)
                .scalar()
            )
            return UserStats(
                followers_count=followers or 0,
                following_count=following or 0,
                blogs_count=blogs or 0,
            )


class BlogRepository:
    """Blog posts and likes."""

    def __init__(self, session_factory: Callable = get_session):
        self._session = session_factory

    @staticmethod
    def _likes_count():
        return (
            select(func.count(models.Like.id))
            .where(models.Like.blog_id == models.Blog.id)
            .correlate(models.Blog)
            .scalar_subquery()
            .label("likes_count")
        )

    def _blog_query(self, db):
        return db.query(models.Blog, models.User, self._likes_count()).join(
            models.User, models.Blog.author_id == models.User.id
        )

    @store_operation("create blog")
    def create_blog(self, blog: Blog) -> Blog:
        """Insert a blog, assign its id and attach the author snapshot."""
        with self._session() as db:
            author = db.get(models.User, blog.author_id)
            if author is None:
                raise NotFound("user", blog.author_id)
            row = models.Blog(
                title=blog.title,
                description=blog.description,
                body=blog.body,
                author_id=blog.author_id,
                created_at=blog.created_at,
                updated_at=blog.updated_at,
            )
            db.add(row)
            db.flush()
            blog.id = row.id
            blog.author = to_user(author)
            blog.likes_count = 0
        return blog

    @store_operation("get blog by id")
    @db_retry
    def get_blog_by_id(self, blog_id: int) -> Blog:
        """Blog with its author and the like count as of this read."""
        with self._session() as db:
            result = self._blog_query(db).filter(models.Blog.id == blog_id).first()
            if result is None:
                raise NotFound("blog", blog_id)
            row, author, likes_count = result
            return to_blog(row, author, likes_count)

    @store_operation("list blogs")
    @db_retry
    def list_blogs(self, limit: int, offset: int) -> List[Blog]:
        with self._session() as db:
            results = (
                self._blog_query(db)
                .order_by(models.Blog.created_at.desc(), models.Blog.id.desc())
                .limit(limit)
                .offset(offset)
                .all()
            )
            return [to_blog(row, author, likes) for row, author, likes in results]

    @store_operation("list blogs by author")
    @db_retry
    def list_blogs_by_author(self, author_id: int, limit: int, offset: int) -> List[Blog]:
        with self._session() as db:
            results = (
                self._blog_query(db)
                .filter(models.Blog.author_id == author_id)
                .order_by(models.Blog.created_at.desc(), models.Blog.id.desc())
                .limit(limit)
                .offset(offset)
                .all()
            )
            return [to_blog(row, author, likes) for row, author, likes in results]

    @store_operation("update blog")
    def update_blog(self, blog: Blog) -> int:
        """Persist edits. Only matches the row if the author is unchanged; returns rows affected."""
        with self._session() as db:
            return (
                db.query(models.Blog)
                .filter(models.Blog.id == blog.id, models.Blog.author_id == blog.author_id)
                .update(
                    {
                        "title": blog.title,
                        "description": blog.description,
                        "body": blog.body,
                        "updated_at": blog.updated_at,
                    },
                    synchronize_session=False,
                )
            )

    @store_operation("delete blog")
    def delete_blog(self, blog_id: int, author_id: int) -> int:
        """Delete the blog only if ``author_id`` wrote it; returns rows affected."""
        with self._session() as db:
            deleted = (
                db.query(models.Blog)
                .filter(models.Blog.id == blog_id, models.Blog.author_id == author_id)
                .delete(synchronize_session=False)
            )
            if deleted:
                db.query(models.Like).filter(models.Like.blog_id == blog_id).delete(
                    synchronize_session=False
                )
            return deleted

    @store_operation("like blog")
    def create_like(self, blog_id: int, user_id: int) -> bool:
        """Create the like edge. Returns False if it already existed."""
        try:
            with self._session() as db:
                if db.get(models.Blog, blog_id) is None:
                    raise NotFound("blog", blog_id)
                if db.get(models.User, user_id) is None:
                    raise NotFound("user", user_id)

                existing = (
                    db.query(models.Like.id)
                    .filter(models.Like.blog_id == blog_id, models.Like.user_id == user_id)
                    .first()
                )
                if existing:
                    return False

                db.add(models.Like(blog_id=blog_id, user_id=user_id))
                db.flush()
                return True
        except IntegrityError:
            return False

    @store_operation("unlike blog")
    def delete_like(self, blog_id: int, user_id: int) -> bool:
        with self._session() as db:
            deleted = (
                db.query(models.Like)
                .filter(models.Like.blog_id == blog_id, models.Like.user_id == user_id)
                .delete(synchronize_session=False)
            )
            return deleted > 0

    @store_operation("list likers")
    @db_retry
    def list_likers(self, blog_id: int, limit: int, offset: int) -> List[User]:
        """Users who liked ``blog_id``, most recent like first."""
        with self._session() as db:
            rows = (
                db.query(models.User)
                .join(models.Like, models.Like.user_id == models.User.id)
                .filter(models.Like.blog_id == blog_id)
                .order_by(models.Like.created_at.desc(), models.Like.id.desc())
                .limit(limit)
                .offset(offset)
                .all()
            )
            return [to_user(row) for row in rows]

    @store_operation("check like")
    @db_retry
    def is_liked(self, blog_id: int, user_id: int) -> bool:
        with self._session() as db:
            return (
                db.query(models.Like.id)
                .filter(models.Like.blog_id == blog_id, models.Like.user_id == user_id)
                .first()
                is not None
            )
