"""initial schema

Revision ID: 0001a2b3c4d5
Revises:
Create Date: 2026-10-19 12:00:00.000000
"""
from typing import List, Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = '0001a2b3c4d5'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns() -> List[sa.Column]:
    return [
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _fk(name: str, target: str, nullable: bool = False, ondelete: str = 'CASCADE', index: bool = True) -> sa.Column:
    return sa.Column(
        name,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey(target, ondelete=ondelete),
        nullable=nullable,
        index=index,
    )


def _pair_table(table: str, actor: str, actor_target: str, target: str, target_ref: str) -> None:
    op.create_table(
        table,
        *_base_columns(),
        _fk(actor, actor_target),
        _fk(target, target_ref),
        sa.UniqueConstraint(actor, target, name=f'uq_{table}_pair'),
    )


def upgrade() -> None:
    op.create_table(
        'users',
        *_base_columns(),
        sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('username', sa.String(50), nullable=False, unique=True, index=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False, server_default=''),
        sa.Column('last_name', sa.String(100), nullable=False, server_default=''),
        sa.Column('avatar', sa.String(500), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('verified', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'user_settings',
        *_base_columns(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('notifications_donations', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('notifications_comments', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('notifications_awards', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('notifications_mentions', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('notifications_new_causes', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('notifications_email', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('notifications_sms', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('activity_visibility', sa.String(20), nullable=False, server_default='friends'),
        sa.Column('language', sa.String(10), nullable=False, server_default='en'),
        sa.Column('region', sa.String(10), nullable=False, server_default='us'),
        sa.Column('currency', sa.String(10), nullable=False, server_default='USD'),
        sa.Column('theme', sa.String(20), nullable=False, server_default='system'),
        sa.Column('interest_tags', sa.JSON(), nullable=False, server_default='[]'),
    )

    op.create_table(
        'password_resets',
        *_base_columns(),
        _fk('user_id', 'users.id'),
        sa.Column('reset_code', sa.String(6), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_used', sa.Boolean(), nullable=False, server_default=sa.text('false')),
    )

    _pair_table('follows', 'follower_id', 'users.id', 'following_id', 'users.id')
    _pair_table('blocks', 'blocker_id', 'users.id', 'blocked_id', 'users.id')

    # ---------------- Events ----------------
    op.create_table(
        'events',
        *_base_columns(),
        _fk('organization_id', 'users.id'),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image', sa.String(500), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('goal_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('raised_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('status', sa.String(20), nullable=False, server_default='active', index=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_table(
        'event_updates',
        *_base_columns(),
        _fk('event_id', 'events.id'),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
    )
    _pair_table('event_supports', 'user_id', 'users.id', 'event_id', 'events.id')
    _pair_table('event_passes', 'user_id', 'users.id', 'event_id', 'events.id')
    _pair_table('event_bookmarks', 'user_id', 'users.id', 'event_id', 'events.id')

    # ---------------- Posts ----------------
    op.create_table(
        'posts',
        *_base_columns(),
        _fk('author_id', 'users.id'),
        _fk('event_id', 'events.id', nullable=True, ondelete='SET NULL'),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('image', sa.String(500), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False, server_default='[]'),
    )
    _pair_table('post_likes', 'user_id', 'users.id', 'post_id', 'posts.id')
    _pair_table('post_bookmarks', 'user_id', 'users.id', 'post_id', 'posts.id')
    _pair_table('post_participants', 'user_id', 'users.id', 'post_id', 'posts.id')

    # ---------------- Comments ----------------
    op.create_table(
        'comments',
        *_base_columns(),
        _fk('author_id', 'users.id'),
        _fk('event_id', 'events.id', nullable=True),
        _fk('post_id', 'posts.id', nullable=True),
        _fk('parent_id', 'comments.id', nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
    )
    _pair_table('comment_likes', 'user_id', 'users.id', 'comment_id', 'comments.id')
    _pair_table('comment_saves', 'user_id', 'users.id', 'comment_id', 'comments.id')
    _pair_table('comment_awards', 'user_id', 'users.id', 'comment_id', 'comments.id')

    # ---------------- Donations ----------------
    op.create_table(
        'donations',
        *_base_columns(),
        _fk('user_id', 'users.id', nullable=True, ondelete='SET NULL'),
        _fk('event_id', 'events.id'),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('payment_method', sa.String(50), nullable=False),
        sa.Column('is_anonymous', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_recurring', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='completed'),
        sa.Column('transaction_id', sa.String(100), nullable=True, unique=True),
    )

    # ---------------- Squads ----------------
    op.create_table(
        'squads',
        *_base_columns(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('avatar', sa.String(500), nullable=True),
        sa.Column('is_private', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('tags', sa.JSON(), nullable=False, server_default='[]'),
        _fk('creator_id', 'users.id', nullable=True, ondelete='SET NULL'),
    )
    op.create_table(
        'squad_members',
        *_base_columns(),
        _fk('squad_id', 'squads.id'),
        _fk('user_id', 'users.id'),
        sa.Column('role', sa.String(20), nullable=False, server_default='member'),
        sa.UniqueConstraint('squad_id', 'user_id', name='uq_squad_members_pair'),
    )
    op.create_table(
        'squad_posts',
        *_base_columns(),
        _fk('squad_id', 'squads.id'),
        _fk('author_id', 'users.id'),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('image', sa.String(500), nullable=True),
    )
    op.create_table(
        'squad_comments',
        *_base_columns(),
        _fk('post_id', 'squad_posts.id'),
        _fk('author_id', 'users.id'),
        _fk('parent_id', 'squad_comments.id', nullable=True, index=False),
        sa.Column('content', sa.Text(), nullable=False),
    )
    _pair_table('squad_post_likes', 'user_id', 'users.id', 'post_id', 'squad_posts.id')
    _pair_table('squad_comment_likes', 'user_id', 'users.id', 'comment_id', 'squad_comments.id')

    # ---------------- Notifications ----------------
    op.create_table(
        'notifications',
        *_base_columns(),
        _fk('user_id', 'users.id'),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('action_url', sa.String(500), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.text('false'), index=True),
    )

    # ---------------- Chat ----------------
    op.create_table(
        'chat_conversations',
        *_base_columns(),
        sa.Column('type', sa.String(20), nullable=False, server_default='private'),
        sa.Column('participants', sa.JSON(), nullable=False),
        sa.Column('unread_counts', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('group_name', sa.String(100), nullable=True),
        sa.Column('group_avatar', sa.String(500), nullable=True),
        _fk('squad_id', 'squads.id', nullable=True, ondelete='SET NULL', index=False),
        _fk('created_by', 'users.id', nullable=True, ondelete='SET NULL', index=False),
        sa.Column('last_message', sa.String(255), nullable=True),
        sa.Column('last_sender_id', sa.String(36), nullable=True),
        sa.Column('last_message_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_table(
        'chat_messages',
        *_base_columns(),
        _fk('conversation_id', 'chat_conversations.id'),
        _fk('sender_id', 'users.id', nullable=True, ondelete='SET NULL', index=False),
        sa.Column('text', sa.Text(), nullable=True),
        sa.Column('attachments', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('read_by', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('reactions', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('edited', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('deleted', sa.Boolean(), nullable=False, server_default=sa.text('false')),
    )
    op.create_table(
        'chat_typing',
        *_base_columns(),
        _fk('conversation_id', 'chat_conversations.id'),
        _fk('user_id', 'users.id', index=False),
        sa.UniqueConstraint('conversation_id', 'user_id', name='uq_chat_typing_pair'),
    )
    op.create_table(
        'presence',
        *_base_columns(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='offline'),
        sa.Column('is_online', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('last_seen', sa.DateTime(timezone=True), nullable=True),
    )


def downgrade() -> None:
    for table in (
        'presence',
        'chat_typing',
        'chat_messages',
        'chat_conversations',
        'notifications',
        'squad_comment_likes',
        'squad_post_likes',
        'squad_comments',
        'squad_posts',
        'squad_members',
        'squads',
        'donations',
        'comment_awards',
        'comment_saves',
        'comment_likes',
        'comments',
        'post_participants',
        'post_bookmarks',
        'post_likes',
        'posts',
        'event_bookmarks',
        'event_passes',
        'event_supports',
        'event_updates',
        'events',
        'blocks',
        'follows',
        'password_resets',
        'user_settings',
        'users',
    ):
        op.drop_table(table)
