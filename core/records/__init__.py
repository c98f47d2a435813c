from .menu import MenuItem
from .user import Role, User
