"""Test the seeders: the sample community and deterministic random data."""

import random

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from blogo.db import session_scope
from blogo.models import Base, Follow
from blogo.models import User as UserRow
from blogo.repositories import BlogRepository, UserRepository
from blogo.services import seeder


def fresh_session_factory():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    return session_scope(sessionmaker(bind=engine, expire_on_commit=False))


class TestSampleData:

    def test_sample_community(self, session_factory):
        created = seeder.seed_sample_data(session_factory)
        assert len(created["users"]) == 3
        assert len(created["blogs"]) == 5

        users = UserRepository(session_factory)
        blogs = BlogRepository(session_factory)
        alice, bob, charlie = created["users"]

        assert users.get_user_by_username("alice").display_name == "Alice Wonder"
        alice_stats = users.get_user_stats(alice)
        assert (alice_stats.followers_count, alice_stats.following_count) == (2, 2)
        assert alice_stats.blogs_count == 2
        assert users.get_user_stats(charlie).following_count == 2

        likes = [blogs.get_blog_by_id(b).likes_count for b in created["blogs"]]
        assert likes == [2, 2, 2, 1, 2]

    def test_sample_community_twice_skips_existing_users(self, session_factory):
        seeder.seed_sample_data(session_factory)
        again = seeder.seed_sample_data(session_factory)
        assert again == {"users": [], "blogs": []}


class TestDeterministicSeeding:

    def test_seed_random_generators_function(self):
        seeder.seed_random_generators()
        values1 = [random.randint(1, 100) for _ in range(5)]
        names1 = [seeder.fake.user_name() for _ in range(3)]

        seeder.seed_random_generators()
        values2 = [random.randint(1, 100) for _ in range(5)]
        names2 = [seeder.fake.user_name() for _ in range(3)]

        assert values1 == values2
        assert names1 == names2

    def test_random_data_is_reproducible(self):
        runs = []
        for _ in range(2):
            factory = fresh_session_factory()
            seeder.seed_random_generators()
            with factory() as db:
                counts = seeder.seed_random_data(db, n_users=8, n_blogs=12)
            with factory() as db:
                usernames = [u.username for u in db.query(UserRow).order_by(UserRow.id)]
            runs.append((counts, usernames))

        assert runs[0] == runs[1]
        assert runs[0][0]["users"] == 8
        assert runs[0][0]["blogs"] == 12

    def test_random_follows_never_self(self):
        factory = fresh_session_factory()
        seeder.seed_random_generators()
        with factory() as db:
            users = seeder.make_users(db, 6)
            seeder.make_follows(db, users)
            pairs = [(f.follower_id, f.following_id) for f in db.query(Follow)]
        assert all(a != b for a, b in pairs)
        assert len(pairs) == len(set(pairs))
