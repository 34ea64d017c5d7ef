from domain.accounts.user import TelegramProfile, User

__all__ = ["TelegramProfile", "User"]
