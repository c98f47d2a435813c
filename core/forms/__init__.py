from .auth_forms import LoginForm
from .menu_forms import MenuForm
