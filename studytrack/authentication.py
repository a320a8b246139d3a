# studytrack/authentication.py
from django.conf import settings
from rest_framework.authentication import BaseAuthentication


class Subject:
    """Authenticated learner, identified only by the identity provider's subject string."""

    is_authenticated = True
    is_anonymous = False

    def __init__(self, sub: str):
        self.id = sub
        self.pk = sub

    def __str__(self):
        return self.id


class SubjectHeaderAuthentication(BaseAuthentication):
    """
    Trust the subject identifier forwarded by the gateway that fronts the identity provider.
    The value is never validated or refreshed here; a missing header leaves the request anonymous.
    """
    def authenticate(self, request):
        sub = request.headers.get(settings.IDENTITY_SUBJECT_HEADER)
        if not sub:
            return None
        return Subject(sub.strip()), None

    def authenticate_header(self, request):
        # Non-empty so DRF answers 401 instead of 403 for anonymous requests.
        return settings.IDENTITY_SUBJECT_HEADER
