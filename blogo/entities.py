"""
Domain entities shared by the services, repositories and cache.

Entities are plain dataclasses with no I/O. ``to_dict``/``from_dict`` produce
the JSON-safe snapshot stored in the cache.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from blogo.errors import InvalidInput


def _now() -> datetime:
    return datetime.utcnow()


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _format_ts(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class User:
    """A registered user."""
    username: str
    email: str
    display_name: str
    bio: str = ""
    profile_image: str = ""
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def new(cls, username: str, email: str, display_name: str) -> "User":
        now = _now()
        return cls(
            username=username,
            email=email,
            display_name=display_name,
            created_at=now,
            updated_at=now,
        )

    def validate(self) -> None:
        if _blank(self.username):
            raise InvalidInput("username")
        if _blank(self.email):
            raise InvalidInput("email")
        if _blank(self.display_name):
            raise InvalidInput("display_name")

    def update(self, display_name: str, bio: str, profile_image: str) -> None:
        """Apply a profile edit. Username and email never change after registration."""
        self.display_name = display_name
        self.bio = bio or ""
        self.profile_image = profile_image or ""
        self.updated_at = _now()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "display_name": self.display_name,
            "bio": self.bio,
            "profile_image": self.profile_image,
            "created_at": _format_ts(self.created_at),
            "updated_at": _format_ts(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=data["id"],
            username=data["username"],
            email=data["email"],
            display_name=data["display_name"],
            bio=data.get("bio") or "",
            profile_image=data.get("profile_image") or "",
            created_at=_parse_ts(data.get("created_at")),
            updated_at=_parse_ts(data.get("updated_at")),
        )


@dataclass
class UserStats:
    """Derived counters for a user; computed on demand, never cached."""
    followers_count: int = 0
    following_count: int = 0
    blogs_count: int = 0


@dataclass
class Blog:
    """A blog post with its author snapshot and like count."""
    title: str
    description: str
    body: str
    author_id: Optional[int]
    id: Optional[int] = None
    author: Optional[User] = None
    likes_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def new(cls, title: str, description: str, body: str, author_id: Optional[int]) -> "Blog":
        now = _now()
        return cls(
            title=title,
            description=description or "",
            body=body,
            author_id=author_id,
            created_at=now,
            updated_at=now,
        )

    def validate(self) -> None:
        if _blank(self.title):
            raise InvalidInput("title")
        if _blank(self.body):
            raise InvalidInput("body")
        if not self.author_id:
            raise InvalidInput("author_id", "invalid author")

    def update(self, title: str, description: str, body: str) -> None:
        self.title = title
        self.description = description or ""
        self.body = body
        self.updated_at = _now()

    def is_owned_by(self, user_id: int) -> bool:
        return self.author_id == user_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "body": self.body,
            "author_id": self.author_id,
            "author": self.author.to_dict() if self.author else None,
            "likes_count": self.likes_count,
            "created_at": _format_ts(self.created_at),
            "updated_at": _format_ts(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Blog":
        author = data.get("author")
        return cls(
            id=data["id"],
            title=data["title"],
            description=data.get("description") or "",
            body=data["body"],
            author_id=data["author_id"],
            author=User.from_dict(author) if author else None,
            likes_count=data.get("likes_count", 0),
            created_at=_parse_ts(data.get("created_at")),
            updated_at=_parse_ts(data.get("updated_at")),
        )


@dataclass
class Registration:
    """Result of a successful registration. ``token`` is None if issuing it failed."""
    user: User
    token: Optional[str] = None


@dataclass
class UserProfile:
    """A user together with their stats.

    When the stats query fails the user is still returned; ``stats`` is then
    None and ``stats_error`` holds the failure.
    """
    user: User
    stats: Optional[UserStats] = None
    stats_error: Optional[Exception] = field(default=None, repr=False)

    @property
    def partial(self) -> bool:
        return self.stats_error is not None
