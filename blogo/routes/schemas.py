"""
Request and response models shared by the user and blog routes.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from blogo.entities import Blog, User, UserStats


class UserOut(BaseModel):
    """Public view of a user."""
    id: int
    username: str
    email: str
    display_name: str
    bio: str = ""
    profile_image: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserOut":
        return cls(**user.to_dict())


class StatsOut(BaseModel):
    followers_count: int = Field(..., description="Number of followers")
    following_count: int = Field(..., description="Number of users followed")
    blogs_count: int = Field(..., description="Number of blogs written")

    @classmethod
    def from_entity(cls, stats: UserStats) -> "StatsOut":
        return cls(
            followers_count=stats.followers_count,
            following_count=stats.following_count,
            blogs_count=stats.blogs_count,
        )


class BlogOut(BaseModel):
    """Public view of a blog post."""
    id: int
    title: str
    description: str = ""
    body: str
    author_id: int
    author: Optional[UserOut] = None
    likes_count: int = 0
    liked: Optional[bool] = Field(None, description="Whether the caller likes this blog")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, blog: Blog, liked: Optional[bool] = None) -> "BlogOut":
        return cls(
            id=blog.id,
            title=blog.title,
            description=blog.description,
            body=blog.body,
            author_id=blog.author_id,
            author=UserOut.from_entity(blog.author) if blog.author else None,
            likes_count=blog.likes_count,
            liked=liked,
            created_at=blog.created_at,
            updated_at=blog.updated_at,
        )


class RegisterRequest(BaseModel):
    username: str = Field(..., description="Unique username")
    email: str = Field(..., description="Unique email address")
    display_name: str = Field(..., description="Name shown on the profile")


class RegisterResponse(BaseModel):
    user: UserOut
    token: Optional[str] = None


class ProfileResponse(BaseModel):
    user: UserOut
    stats: Optional[StatsOut] = None
    partial: bool = Field(False, description="True when stats could not be computed")
    is_following: Optional[bool] = Field(None, description="Whether the caller follows this user")


class ProfileUpdateRequest(BaseModel):
    display_name: str
    bio: str = ""
    profile_image: str = ""


class ActionRequest(BaseModel):
    action: str = Field(..., description="Action to perform")


class BlogRequest(BaseModel):
    title: str = ""
    description: str = ""
    body: str = ""


class UserPage(BaseModel):
    users: List[UserOut]
    limit: int
    offset: int


class BlogPage(BaseModel):
    blogs: List[BlogOut]
    limit: int
    offset: int


class MessageResponse(BaseModel):
    message: str
