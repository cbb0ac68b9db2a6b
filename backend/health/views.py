from django.db import DatabaseError, connection
from django.core.cache import caches
from django.db.migrations.executor import MigrationExecutor
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView
from rest_framework.response import Response

from apps.audit.models import AuditEntry


class LiveView(APIView):
    """Liveness probe: process is running. No DB or external deps."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        return Response({"status": "alive"})


class ReadyView(APIView):
    """Readiness probe: DB, cache, migrations, audit table."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        return self._run_checks()

    def _run_checks(self):

        checks = {}

        # DB check
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1;")
            checks["database"] = "ok"
        except DatabaseError:
            checks["database"] = "error"

        # Migration consistency check
        try:
            executor = MigrationExecutor(connection)
            plan = executor.migration_plan(executor.loader.graph.leaf_nodes())
            checks["migrations"] = "ok" if not plan else "pending"
        except DatabaseError:
            checks["migrations"] = "error"

        # Cache check
        cache = caches["default"]
        cache.set("health_check", "ok", timeout=5)
        checks["cache"] = "ok" if cache.get("health_check") == "ok" else "error"

        # Audit trail must be readable for the service to accept signatures
        try:
            AuditEntry.objects.exists()
            checks["audit_table"] = "ok"
        except DatabaseError:
            checks["audit_table"] = "error"

        overall = "ready" if all(v == "ok" for v in checks.values()) else "not_ready"
        status_code = 200 if overall == "ready" else 503

        return Response({"status": overall, "checks": checks}, status=status_code)
