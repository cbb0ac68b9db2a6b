"""
URL routing for user endpoints.
"""

from django.urls import path
from apps.users import views

app_name = "users"

urlpatterns = [
    path("users", views.list_or_create_users, name="list-or-create-users"),
    path("users/<uuid:userId>", views.update_user, name="update-user"),
]
