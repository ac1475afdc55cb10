"""Global enums — must match DB CHECK constraints exactly.

See alembic/versions/ for the constraint definitions.
"""

from enum import Enum


class UserStatus(str, Enum):
    ONLINE = "online"
    AWAY = "away"
    OFFLINE = "offline"


class TransactionType(str, Enum):
    # Gift (sender + receiver paired, nets to zero)
    GIFT_SENT = "gift_sent"
    GIFT_RECEIVED = "gift_received"
    # Investment (stake leaves the wallet, settlement comes back)
    INVESTMENT = "investment"
    WITHDRAW = "withdraw"
    # Tournament (fee flows into the prize pool)
    TOURNAMENT_ENTRY = "tournament_entry"
    TOURNAMENT_PRIZE = "tournament_prize"


class ReferenceType(str, Enum):
    GIFT = "gift"
    INVESTMENT = "investment"
    TOURNAMENT = "tournament"
    POST = "post"
    USER = "user"


class NotificationType(str, Enum):
    FOLLOW = "follow"
    LIKE = "like"
    COMMENT = "comment"
    GIFT = "gift"
    TOURNAMENT = "tournament"


class ReactionType(str, Enum):
    LIKE = "like"


class InvestmentTargetType(str, Enum):
    USER = "user"
    PLUGIN = "plugin"


class InvestmentStatus(str, Enum):
    ACTIVE = "active"
    WITHDRAWN = "withdrawn"


class TournamentStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    ENDED = "ended"


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
