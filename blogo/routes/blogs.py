"""
FastAPI routes for blog posts and likes.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from blogo.auth import get_current_user_id, get_optional_user_id
from blogo.dependencies import get_blog_service
from blogo.routes.schemas import (
    ActionRequest,
    BlogOut,
    BlogPage,
    BlogRequest,
    MessageResponse,
    UserOut,
    UserPage,
)
from blogo.services.blogs import BlogService

router = APIRouter(prefix="/api/b", tags=["blogs"])


@router.get("", response_model=BlogPage)
def list_blogs(
    limit: int = Query(20, ge=1, le=100, description="Page size (1-100)"),
    offset: int = Query(0, ge=0, description="Number of blogs to skip"),
    blogs: BlogService = Depends(get_blog_service),
) -> BlogPage:
    """All blogs, newest first."""
    page = blogs.get_all(limit, offset)
    return BlogPage(blogs=[BlogOut.from_entity(b) for b in page], limit=limit, offset=offset)


@router.post("/new", response_model=BlogOut, status_code=status.HTTP_201_CREATED)
def create_blog(
    body: BlogRequest,
    current_user_id: int = Depends(get_current_user_id),
    blogs: BlogService = Depends(get_blog_service),
) -> BlogOut:
    blog = blogs.create_blog(body.title, body.description, body.body, current_user_id)
    return BlogOut.from_entity(blog)


@router.get("/{blog_id}", response_model=BlogOut)
def get_blog(
    blog_id: int = Path(..., description="ID of the blog", ge=1),
    viewer_id: Optional[int] = Depends(get_optional_user_id),
    blogs: BlogService = Depends(get_blog_service),
) -> BlogOut:
    """Get a blog with its author and like count."""
    blog = blogs.get_by_id(blog_id)
    liked = blogs.is_liked_by(blog_id, viewer_id) if viewer_id is not None else None
    return BlogOut.from_entity(blog, liked=liked)


@router.post("/{blog_id}", response_model=MessageResponse)
def like_blog(
    body: ActionRequest,
    blog_id: int = Path(..., description="ID of the blog", ge=1),
    current_user_id: int = Depends(get_current_user_id),
    blogs: BlogService = Depends(get_blog_service),
) -> MessageResponse:
    """Like or unlike a blog (``{"action": "like" | "unlike"}``)."""
    if body.action == "like":
        blogs.like_blog(blog_id, current_user_id)
    elif body.action == "unlike":
        blogs.unlike_blog(blog_id, current_user_id)
    else:
        raise HTTPException(status_code=400, detail="Invalid action. Use 'like' or 'unlike'")
    return MessageResponse(message=f"Successfully {body.action}d blog")


@router.post("/{blog_id}/edit", response_model=BlogOut)
def update_blog(
    body: BlogRequest,
    blog_id: int = Path(..., description="ID of the blog", ge=1),
    current_user_id: int = Depends(get_current_user_id),
    blogs: BlogService = Depends(get_blog_service),
) -> BlogOut:
    """Edit a blog. Only its author may do this."""
    blog = blogs.update_blog(blog_id, body.title, body.description, body.body, current_user_id)
    return BlogOut.from_entity(blog)


@router.post("/{blog_id}/delete", response_model=MessageResponse)
def delete_blog(
    blog_id: int = Path(..., description="ID of the blog", ge=1),
    current_user_id: int = Depends(get_current_user_id),
    blogs: BlogService = Depends(get_blog_service),
) -> MessageResponse:
    """Delete a blog. Only its author may do this."""
    blogs.delete_blog(blog_id, current_user_id)
    return MessageResponse(message="Blog deleted successfully")


@router.get("/{blog_id}/likes", response_model=UserPage)
def get_blog_likes(
    blog_id: int = Path(..., description="ID of the blog", ge=1),
    limit: int = Query(20, ge=1, le=100, description="Page size (1-100)"),
    offset: int = Query(0, ge=0, description="Number of users to skip"),
    blogs: BlogService = Depends(get_blog_service),
) -> UserPage:
    """Users who liked the blog, most recent like first."""
    likers = blogs.get_blog_likes(blog_id, limit, offset)
    return UserPage(users=[UserOut.from_entity(u) for u in likers], limit=limit, offset=offset)
