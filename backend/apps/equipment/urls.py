"""
URL routing for equipment endpoints.
"""

from django.urls import path
from apps.equipment import views

app_name = "equipment"

urlpatterns = [
    path("equipment", views.list_or_create_equipment, name="list-or-create-equipment"),
    path("equipment/<uuid:equipmentId>", views.equipment_detail, name="equipment-detail"),
]
