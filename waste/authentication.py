from rest_framework.authentication import SessionAuthentication


class JSONSessionAuthentication(SessionAuthentication):
    """Session auth that answers 401 rather than 403 when nobody is logged in."""

    def authenticate_header(self, request):
        return 'Session'
