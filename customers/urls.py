from django.urls import path

from customers.views.users import user_bulk_delete, user_delete, user_list, user_toggle_active

app_name = "customers"

urlpatterns = [
    path("users/", user_list, name="user-list"),
    path("users/bulk-delete/", user_bulk_delete, name="user-bulk-delete"),
    path("users/<int:pk>/status/", user_toggle_active, name="user-status"),
    path("users/<int:pk>/delete/", user_delete, name="user-delete"),
]
