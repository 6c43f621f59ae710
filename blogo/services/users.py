"""
User service: registration, profiles and the follow graph.
"""

import logging
from typing import List, Optional

from blogo.config import USER_CACHE_TTL_SECONDS
from blogo.entities import Registration, User, UserProfile
from blogo.errors import BlogoError, InvalidInput, SelfFollowNotAllowed
from blogo.repositories import UserRepository
from blogo.services.caching import CacheAsideService

logger = logging.getLogger(__name__)


class UserService(CacheAsideService):
    """
    Orchestrates the user repository and the cache.

    Args:
        users: User repository (source of truth)
        cache: Entity cache, or None to run without caching
        token_issuer: Object with ``issue_token(user_id, username, email)``
        user_ttl: Seconds a cached user snapshot stays valid
    """

    def __init__(
        self,
        users: UserRepository,
        cache=None,
        token_issuer=None,
        user_ttl: int = USER_CACHE_TTL_SECONDS,
    ):
        super().__init__(cache)
        self.users = users
        self.token_issuer = token_issuer
        self.user_ttl = user_ttl

    def register(self, username: str, email: str, display_name: str) -> Registration:
        """
        Create a user and issue an access token for them.

        Returns:
            Registration with the stored user; ``token`` is None if issuing it failed

        Raises:
            InvalidInput: a required field is empty
            Conflict: username or email already taken
        """
        user = User.new(username, email, display_name)
        user.validate()

        self.users.create_user(user)
        logger.info("Registered user %s (id=%s)", user.username, user.id)

        self._cache_call(f"set user:{user.id}", self.cache.set_user, user, self.user_ttl)

        token = None
        if self.token_issuer is not None:
            try:
                token = self.token_issuer.issue_token(user.id, user.username, user.email)
            except Exception as e:
                logger.warning("Could not issue token for user %s: %s", user.id, e)

        return Registration(user=user, token=token)

    def get_by_id(self, user_id: int) -> User:
        return self._read_through(
            "user",
            user_id,
            self.cache.get_user,
            self.users.get_user_by_id,
            self.cache.set_user,
            self.user_ttl,
        )

    def get_by_username(self, username: str) -> User:
        return self.users.get_user_by_username(username)

    def get_with_stats(self, user_id: int) -> UserProfile:
        """
        Fetch a user and their follower/following/blog counts.

        A failure loading the user propagates. A failure computing the stats
        does not: the profile comes back with ``stats=None`` and ``partial``
        set.
        """
        user = self.get_by_id(user_id)
        try:
            stats = self.users.get_user_stats(user_id)
        except BlogoError as e:
            logger.warning("Stats unavailable for user %s: %s", user_id, e)
            return UserProfile(user=user, stats=None, stats_error=e)
        return UserProfile(user=user, stats=stats)

    def update_profile(
        self, user_id: int, display_name: str, bio: Optional[str], profile_image: Optional[str]
    ) -> User:
        if not display_name or not display_name.strip():
            raise InvalidInput("display_name")

        # Precondition read goes to the database, not the cache.
        user = self.users.get_user_by_id(user_id)
        user.update(display_name, bio, profile_image)
        user.validate()
        self.users.update_user(user)
        logger.info("Updated profile of user %s", user_id)

        self._invalidate(f"user:{user_id}", self.cache.delete_user, user_id)
        return user

    def follow(self, follower_id: int, following_id: int) -> None:
        if follower_id == following_id:
            raise SelfFollowNotAllowed(follower_id)

        if self.users.create_follow(follower_id, following_id):
            logger.info("User %s followed %s", follower_id, following_id)
        self._invalidate_pair(follower_id, following_id)

    def unfollow(self, follower_id: int, following_id: int) -> None:
        if self.users.delete_follow(follower_id, following_id):
            logger.info("User %s unfollowed %s", follower_id, following_id)
        self._invalidate_pair(follower_id, following_id)

    def is_following(self, follower_id: int, following_id: int) -> bool:
        return self.users.is_following(follower_id, following_id)

    def get_followers(self, user_id: int, limit: int = 20, offset: int = 0) -> List[User]:
        return self.users.list_followers(user_id, limit, offset)

    def get_following(self, user_id: int, limit: int = 20, offset: int = 0) -> List[User]:
        return self.users.list_following(user_id, limit, offset)

    def _invalidate_pair(self, first: int, second: int) -> None:
        for uid in (first, second):
            self._invalidate(f"user:{uid}", self.cache.delete_user, uid)
