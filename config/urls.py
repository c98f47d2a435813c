from django.urls import include, path

urlpatterns = [
    path("", include("core.urls")),
    path("", include("catalog.urls")),
    path("", include("sales.urls")),
    path("", include("customers.urls")),
]
