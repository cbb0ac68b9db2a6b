from django.urls import include, path

from .health import health_check

urlpatterns = [
    path("api/health/", health_check),
    path("health/", include("health.urls")),
    # API v1: each app's urls carry their own resource prefix
    # (e.g. /api/v1/logs/<id>/submit).
    path("api/v1/", include("apps.auth.urls")),
    path("api/v1/", include("apps.users.urls")),
    path("api/v1/", include("apps.audit.urls")),
    path("api/v1/", include("apps.equipment.urls")),
    path("api/v1/", include("apps.maintenance.urls")),
    path("api/v1/", include("apps.logbook.urls")),
]
