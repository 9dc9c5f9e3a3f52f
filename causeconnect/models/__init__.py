from causeconnect.models.base import Base
from causeconnect.models.user import User, UserSettings
from causeconnect.models.password_reset import PasswordReset
from causeconnect.models.social import Follow, Block
from causeconnect.models.event import Event, EventUpdate, EventSupport, EventPass, EventBookmark, EventStatus
from causeconnect.models.post import Post, PostLike, PostBookmark, PostParticipant
from causeconnect.models.comment import Comment, CommentLike, CommentSave, CommentAward
from causeconnect.models.donation import Donation
from causeconnect.models.custom_feed import CustomFeed
from causeconnect.models.squad import (
    Squad,
    SquadMember,
    SquadPost,
    SquadComment,
    SquadPostLike,
    SquadCommentLike,
    SquadRole,
)
from causeconnect.models.notification import Notification, NotificationType
from causeconnect.models.chat import (
    Conversation,
    ChatMessage,
    TypingIndicator,
    Presence,
    ConversationType,
    PresenceStatus,
)

__all__ = [
    "Base",
    "User",
    "UserSettings",
    "PasswordReset",
    "Follow",
    "Block",
    "Event",
    "EventUpdate",
    "EventSupport",
    "EventPass",
    "EventBookmark",
    "EventStatus",
    "Post",
    "PostLike",
    "PostBookmark",
    "PostParticipant",
    "Comment",
    "CommentLike",
    "CommentSave",
    "CommentAward",
    "Donation",
    "CustomFeed",
    "Squad",
    "SquadMember",
    "SquadPost",
    "SquadComment",
    "SquadPostLike",
    "SquadCommentLike",
    "SquadRole",
    "Notification",
    "NotificationType",
    "Conversation",
    "ChatMessage",
    "TypingIndicator",
    "Presence",
    "ConversationType",
    "PresenceStatus",
]
