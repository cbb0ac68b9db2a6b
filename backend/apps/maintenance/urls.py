"""
URL routing for preventive maintenance endpoints.
"""

from django.urls import path
from apps.maintenance import views

app_name = "maintenance"

urlpatterns = [
    path("pm-schedules", views.list_or_create_schedules, name="list-or-create-schedules"),
    path("pm-schedules/<uuid:scheduleId>", views.update_schedule, name="update-schedule"),
]
