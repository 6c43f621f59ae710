from __future__ import annotations

import logging
import random
from typing import Callable, Sequence

from faker import Faker
from sqlalchemy.orm import Session

from blogo.db import get_session
from blogo.entities import Blog, User
from blogo.errors import Conflict
from blogo.models import Blog as BlogRow
from blogo.models import Follow, Like
from blogo.models import User as UserRow
from blogo.repositories import BlogRepository, UserRepository

logger = logging.getLogger(__name__)

SEED = 1337

fake = Faker()

SAMPLE_USERS = [
    ("alice", "alice@example.com", "Alice Wonder"),
    ("bob", "bob@example.com", "Bob Builder"),
    ("charlie", "charlie@example.com", "Charlie Brown"),
]

# (title, description, body, index of the author in SAMPLE_USERS)
SAMPLE_BLOGS = [
    (
        "Getting Started with Go",
        "A beginner's guide to Go programming",
        "Go is an open source programming language that makes it easy to build simple, "
        "reliable, and efficient software. In this comprehensive guide, we'll explore the "
        "fundamentals of Go programming...",
        0,
    ),
    (
        "Building RESTful APIs",
        "How to build clean REST APIs with Go",
        "RESTful APIs are the backbone of modern web applications. In this post, I'll share "
        "best practices and patterns for building robust APIs using Go...",
        0,
    ),
    (
        "Docker for Beginners",
        "Understanding containerization",
        "Docker has revolutionized how we deploy applications. Let's dive into what "
        "containers are and why they're so powerful...",
        1,
    ),
    (
        "Database Design Tips",
        "Essential database design principles",
        "Good database design is crucial for application performance and maintainability. "
        "Here are some key principles to follow...",
        1,
    ),
    (
        "The Art of Code Review",
        "How to give and receive effective code reviews",
        "Code reviews are an essential part of software development. They help catch bugs, "
        "share knowledge, and maintain code quality...",
        2,
    ),
]

# (follower index, following index)
SAMPLE_FOLLOWS = [(0, 1), (0, 2), (1, 0), (2, 0), (2, 1)]

# (blog index, user index); charlie likes every blog
SAMPLE_LIKES = [(1, 0), (2, 0), (0, 1), (4, 1)] + [(b, 2) for b in range(len(SAMPLE_BLOGS))]


def seed_random_generators(seed: int = SEED) -> None:
    """Make random data generation reproducible."""
    random.seed(seed)
    Faker.seed(seed)
    fake.seed_instance(seed)
    fake.unique.clear()


def seed_sample_data(session_factory: Callable = get_session) -> dict:
    """
    Create the sample community: three users, five blogs, follows and likes.

    Users that already exist are skipped with a warning, so running it twice
    does not fail. Returns the ids that were created.
    """
    users = UserRepository(session_factory)
    blogs = BlogRepository(session_factory)

    user_ids = []
    for username, email, display_name in SAMPLE_USERS:
        try:
            user = users.create_user(User.new(username, email, display_name))
        except Conflict as e:
            logger.warning("Could not create user %s: %s", username, e)
            continue
        user_ids.append(user.id)

    if len(user_ids) < len(SAMPLE_USERS):
        return {"users": user_ids, "blogs": []}

    blog_ids = []
    for title, description, body, author_idx in SAMPLE_BLOGS:
        blog = blogs.create_blog(Blog.new(title, description, body, user_ids[author_idx]))
        blog_ids.append(blog.id)

    for follower_idx, following_idx in SAMPLE_FOLLOWS:
        users.create_follow(user_ids[follower_idx], user_ids[following_idx])

    for blog_idx, user_idx in SAMPLE_LIKES:
        blogs.create_like(blog_ids[blog_idx], user_ids[user_idx])

    return {"users": user_ids, "blogs": blog_ids}


def make_users(db: Session, n_users: int) -> list[UserRow]:
    users = []
    for _ in range(n_users):
        username = fake.unique.user_name()
        users.append(
            UserRow(
                username=username,
                email=fake.unique.email(),
                display_name=fake.name(),
                bio=fake.sentence(nb_words=random.randint(5, 15)),
                profile_image="",
            )
        )
    db.add_all(users)
    db.flush()
    return users


def make_blogs(db: Session, users: Sequence[UserRow], n_blogs: int) -> list[BlogRow]:
    blogs: list[BlogRow] = []
    for _ in range(n_blogs):
        author = random.choice(users)
        created = fake.date_time_between(start_date="-60d", end_date="now")
        blogs.append(
            BlogRow(
                title=fake.sentence(nb_words=random.randint(3, 8)).rstrip("."),
                description=fake.sentence(nb_words=random.randint(6, 12)),
                body="\n\n".join(fake.paragraphs(nb=random.randint(2, 6))),
                author_id=author.id,
                created_at=created,
                updated_at=created,
            )
        )
    db.add_all(blogs)
    db.flush()
    return blogs


def make_follows(db: Session, users: Sequence[UserRow], max_per_user: int = 10) -> int:
    """Random follow graph without self-follows or duplicate pairs."""
    created = 0
    for user in users:
        others = [u for u in users if u.id != user.id]
        if not others:
            continue
        for target in random.sample(others, k=random.randint(0, min(max_per_user, len(others)))):
            db.add(Follow(follower_id=user.id, following_id=target.id))
            created += 1
    db.flush()
    return created


def make_likes(db: Session, blogs: Sequence[BlogRow], users: Sequence[UserRow]) -> int:
    """Each blog gets likes from a random subset of users, biased toward few."""
    created = 0
    for blog in blogs:
        n = min(len(users), int(random.expovariate(1 / 5)))
        for user in random.sample(list(users), k=n):
            db.add(Like(blog_id=blog.id, user_id=user.id))
            created += 1
    db.flush()
    return created


def seed_random_data(db: Session, n_users: int, n_blogs: int) -> dict:
    users = make_users(db, n_users)
    blogs = make_blogs(db, users, n_blogs) if users else []
    follows = make_follows(db, users)
    likes = make_likes(db, blogs, users)
    return {"users": len(users), "blogs": len(blogs), "follows": follows, "likes": likes}
