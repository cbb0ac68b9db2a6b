from django.http import JsonResponse
from django.db import DatabaseError, connection


def health_check(request):
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        return JsonResponse(
            {
                "status": "ok",
                "database": "connected",
                "service": "elogbook",
            },
            status=200,
        )
    except DatabaseError:
        return JsonResponse(
            {
                "status": "unhealthy",
                "database": "disconnected",
                "service": "elogbook",
            },
            status=503,
        )
