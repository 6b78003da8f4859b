from eventhub.db.repositories.user_repository import UserRepository

__all__ = ["UserRepository"]
