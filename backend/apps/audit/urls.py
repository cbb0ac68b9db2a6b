"""
URL routing for audit trail endpoints.
"""

from django.urls import path
from apps.audit import views

app_name = "audit"

urlpatterns = [
    path("audit", views.query_audit_trail, name="query-audit-trail"),
]
