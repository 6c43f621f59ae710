"""create blog schema

Revision ID: 3c1d7e9a4b20
Revises:
Create Date: 2025-10-02 18:41:07.113902

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1d7e9a4b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=50), nullable=False, unique=True),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True),
        sa.Column('display_name', sa.String(length=100), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('profile_image', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'blogs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column(
            'author_id', sa.Integer(),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('idx_blogs_author', 'blogs', ['author_id'], unique=False)
    op.create_index('idx_blogs_created', 'blogs', [sa.text('created_at DESC')], unique=False)

    op.create_table(
        'followers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'follower_id', sa.Integer(),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'following_id', sa.Integer(),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('follower_id', 'following_id', name='uq_followers_pair'),
        sa.CheckConstraint('follower_id != following_id', name='ck_followers_no_self'),
    )
    op.create_index('idx_followers_follower', 'followers', ['follower_id'], unique=False)
    op.create_index('idx_followers_following', 'followers', ['following_id'], unique=False)

    op.create_table(
        'likes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'blog_id', sa.Integer(),
            sa.ForeignKey('blogs.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'user_id', sa.Integer(),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('blog_id', 'user_id', name='uq_likes_pair'),
    )
    op.create_index('idx_likes_blog', 'likes', ['blog_id'], unique=False)
    op.create_index('idx_likes_user', 'likes', ['user_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_likes_user', table_name='likes')
    op.drop_index('idx_likes_blog', table_name='likes')
    op.drop_table('likes')
    op.drop_index('idx_followers_following', table_name='followers')
    op.drop_index('idx_followers_follower', table_name='followers')
    op.drop_table('followers')
    op.drop_index('idx_blogs_created', table_name='blogs')
    op.drop_index('idx_blogs_author', table_name='blogs')
    op.drop_table('blogs')
    op.drop_table('users')
