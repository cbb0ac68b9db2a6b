from rest_framework.throttling import AnonRateThrottle, UserRateThrottle


class MutationUserThrottle(UserRateThrottle):
    scope = "mutation_user"

    def allow_request(self, request, view):
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            return super().allow_request(request, view)
        return True


class LoginRateThrottle(AnonRateThrottle):
    """Limits login attempts per client address."""

    scope = "login"
