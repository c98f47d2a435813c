from django.urls import path

from core.views.auth import login_view, logout_view
from core.views.dashboard import dashboard
from core.views.menu import menu_delete, menu_edit

app_name = "core"

urlpatterns = [
    path("", dashboard, name="dashboard"),
    path("login/", login_view, name="login"),
    path("logout/", logout_view, name="logout"),
    path("menus/", menu_edit, name="menu-edit"),
    path("menus/<int:pk>/", menu_edit, name="menu-edit"),
    path("menus/<int:pk>/delete/", menu_delete, name="menu-delete"),
]
