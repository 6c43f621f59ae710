"""
FastAPI routes for registration, profiles and follows.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from blogo.auth import get_current_user_id, get_optional_user_id
from blogo.dependencies import get_blog_service, get_user_service
from blogo.routes.schemas import (
    ActionRequest,
    BlogOut,
    BlogPage,
    MessageResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    RegisterResponse,
    StatsOut,
    UserOut,
    UserPage,
)
from blogo.services.blogs import BlogService
from blogo.services.users import UserService

router = APIRouter(prefix="/api/u", tags=["users"])


@router.post("/new", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    body: RegisterRequest,
    users: UserService = Depends(get_user_service),
) -> RegisterResponse:
    """Register a new user and return an access token for them."""
    registration = users.register(body.username, body.email, body.display_name)
    return RegisterResponse(
        user=UserOut.from_entity(registration.user),
        token=registration.token,
    )


@router.get("/{user_id}", response_model=ProfileResponse)
def get_user(
    user_id: int = Path(..., description="ID of the user", ge=1),
    viewer_id: Optional[int] = Depends(get_optional_user_id),
    users: UserService = Depends(get_user_service),
) -> ProfileResponse:
    """
    Get a user profile with follower, following and blog counts.

    ``partial`` is true when the counts could not be computed; the profile
    itself is still returned.
    """
    profile = users.get_with_stats(user_id)
    is_following = None
    if viewer_id is not None and viewer_id != user_id:
        is_following = users.is_following(viewer_id, user_id)
    return ProfileResponse(
        user=UserOut.from_entity(profile.user),
        stats=StatsOut.from_entity(profile.stats) if profile.stats else None,
        partial=profile.partial,
        is_following=is_following,
    )


@router.post("/{user_id}", response_model=MessageResponse)
def follow_user(
    body: ActionRequest,
    user_id: int = Path(..., description="ID of the user to follow or unfollow", ge=1),
    current_user_id: int = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Follow or unfollow a user (``{"action": "follow" | "unfollow"}``)."""
    if body.action == "follow":
        users.follow(current_user_id, user_id)
    elif body.action == "unfollow":
        users.unfollow(current_user_id, user_id)
    else:
        raise HTTPException(
            status_code=400,
            detail="Invalid action. Use 'follow' or 'unfollow'",
        )
    return MessageResponse(message=f"Successfully {body.action}ed user")


@router.post("/{user_id}/manage", response_model=UserOut)
def update_user(
    body: ProfileUpdateRequest,
    user_id: int = Path(..., description="ID of the user to update", ge=1),
    current_user_id: int = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
) -> UserOut:
    """Update display name, bio and profile image of the caller's own profile."""
    if current_user_id != user_id:
        raise HTTPException(status_code=403, detail="You can only update your own profile")
    user = users.update_profile(user_id, body.display_name, body.bio, body.profile_image)
    return UserOut.from_entity(user)


@router.get("/{user_id}/following", response_model=UserPage)
def get_following(
    user_id: int = Path(..., ge=1),
    limit: int = Query(20, ge=1, le=100, description="Page size (1-100)"),
    offset: int = Query(0, ge=0, description="Number of users to skip"),
    users: UserService = Depends(get_user_service),
) -> UserPage:
    """Users followed by ``user_id``, most recent first."""
    following = users.get_following(user_id, limit, offset)
    return UserPage(users=[UserOut.from_entity(u) for u in following], limit=limit, offset=offset)


@router.get("/{user_id}/follows", response_model=UserPage)
def get_followers(
    user_id: int = Path(..., ge=1),
    limit: int = Query(20, ge=1, le=100, description="Page size (1-100)"),
    offset: int = Query(0, ge=0, description="Number of users to skip"),
    users: UserService = Depends(get_user_service),
) -> UserPage:
    """Followers of ``user_id``, most recent first."""
    followers = users.get_followers(user_id, limit, offset)
    return UserPage(users=[UserOut.from_entity(u) for u in followers], limit=limit, offset=offset)


@router.get("/{user_id}/blogs", response_model=BlogPage)
def get_user_blogs(
    user_id: int = Path(..., ge=1),
    limit: int = Query(20, ge=1, le=100, description="Page size (1-100)"),
    offset: int = Query(0, ge=0, description="Number of blogs to skip"),
    blogs: BlogService = Depends(get_blog_service),
) -> BlogPage:
    """Blogs written by ``user_id``, newest first."""
    page = blogs.get_by_author(user_id, limit, offset)
    return BlogPage(blogs=[BlogOut.from_entity(b) for b in page], limit=limit, offset=offset)
