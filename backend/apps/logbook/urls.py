"""
URL routing for log entry endpoints.
"""

from django.urls import path
from apps.logbook import views

app_name = "logbook"

urlpatterns = [
    path("logs", views.list_or_create_entries, name="list-or-create-entries"),
    path("logs/<uuid:entryId>", views.entry_detail, name="entry-detail"),
    path("logs/<uuid:entryId>/submit", views.submit_entry, name="submit-entry"),
    path("logs/<uuid:entryId>/approve", views.approve_entry, name="approve-entry"),
    path("logs/<uuid:entryId>/reject", views.reject_entry, name="reject-entry"),
    path("reports/logbook", views.export_log_report, name="export-log-report"),
]
