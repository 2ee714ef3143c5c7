from .secret import Secret
from .user import User

__all__ = ["Secret", "User"]
