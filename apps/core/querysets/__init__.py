from .user import UserManager

__all__ = ["UserManager"]
