"""Unified error codes and custom exceptions.

Taxonomy (HTTP status in brackets):
  ValidationError [400]        malformed or missing input
  AuthenticationError [401]    no valid bearer token
  NotFoundError [404]          missing user/post/tournament/investment/...
  InsufficientFundsError [400] debit larger than the current balance
  BusinessRuleViolation [400]  self-follow, self-gift, already-joined, ...

Error code ranges:
  1xxx: Auth/User
  2xxx: Wallet
  3xxx: Social/Feed
  4xxx: Messaging
  5xxx: Investments
  6xxx: Gaming
  7xxx: Marketplace
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class ValidationError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 400)


class AuthenticationError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 401)


class NotFoundError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 404)


class BusinessRuleViolation(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 400)


# --- 1xxx: Auth/User ---

class UsernameExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Username already exists", 409)


class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already exists", 409)


class InvalidCredentialsError(AuthenticationError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password")


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class InvalidRefreshTokenError(AuthenticationError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired")


class AuthenticationRequiredError(AuthenticationError):
    def __init__(self) -> None:
        super().__init__(1006, "Authentication required")


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1007, f"User not found: {user_id}")


# --- 2xxx: Wallet ---

class InsufficientFundsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(2001, "Insufficient coins", 400)
        self.required = required
        self.available = available


class InvalidAmountError(ValidationError):
    def __init__(self, amount: object) -> None:
        super().__init__(2002, f"Amount must be a positive integer, got {amount!r}")


class SelfTargetNotAllowedError(BusinessRuleViolation):
    def __init__(self) -> None:
        super().__init__(2003, "Cannot send a gift to yourself")


# --- 3xxx: Social/Feed ---

class SelfFollowError(BusinessRuleViolation):
    def __init__(self) -> None:
        super().__init__(3001, "Cannot follow yourself")


class PostNotFoundError(NotFoundError):
    def __init__(self, post_id: str) -> None:
        super().__init__(3002, f"Post not found: {post_id}")


class NotificationNotFoundError(NotFoundError):
    def __init__(self, notification_id: str) -> None:
        super().__init__(3003, f"Notification not found: {notification_id}")


# --- 4xxx: Messaging ---

class ConversationNotFoundError(NotFoundError):
    def __init__(self, conversation_id: str) -> None:
        super().__init__(4001, f"Conversation not found: {conversation_id}")


class InvalidParticipantsError(ValidationError):
    def __init__(self, detail: str) -> None:
        super().__init__(4002, f"Invalid participants: {detail}")


# --- 5xxx: Investments ---

class InvestmentNotFoundError(NotFoundError):
    def __init__(self, investment_id: str) -> None:
        super().__init__(5001, f"Investment not found: {investment_id}")


class InvestmentNotActiveError(BusinessRuleViolation):
    def __init__(self, investment_id: str) -> None:
        super().__init__(5002, f"Investment already withdrawn: {investment_id}")


# --- 6xxx: Gaming ---

class TournamentNotFoundError(NotFoundError):
    def __init__(self, tournament_id: str) -> None:
        super().__init__(6001, f"Tournament not found: {tournament_id}")


class AlreadyJoinedError(BusinessRuleViolation):
    def __init__(self) -> None:
        super().__init__(6002, "Already joined this tournament")


class TournamentFullError(BusinessRuleViolation):
    def __init__(self) -> None:
        super().__init__(6003, "Tournament is full")


class NotJoinedError(BusinessRuleViolation):
    def __init__(self) -> None:
        super().__init__(6004, "Not joined this tournament")


class GameNotFoundError(NotFoundError):
    def __init__(self, game_id: str) -> None:
        super().__init__(6005, f"Game not found: {game_id}")


# --- 7xxx: Marketplace ---

class PluginNotFoundError(NotFoundError):
    def __init__(self, plugin_id: str) -> None:
        super().__init__(7001, f"Plugin not found: {plugin_id}")


# --- 9xxx: System ---

class RequestValidationFailedError(ValidationError):
    def __init__(self, detail: str) -> None:
        super().__init__(9000, detail)


class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
