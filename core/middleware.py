import logging

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect
from django.urls import reverse
from django.utils.http import urlencode

from core.services.api import ApiAuthError
from core.services.session import ConsoleSession

logger = logging.getLogger(__name__)


class ConsoleSessionMiddleware:
    """Attach ``request.console`` and send expired sessions back to login.

    Also closes the API client a view opened for the request.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.console = ConsoleSession.load(request.session)
        try:
            return self.get_response(request)
        finally:
            client = getattr(request, "api_client", None)
            if client is not None:
                client.close()

    def process_exception(self, request, exception):
        if not isinstance(exception, ApiAuthError):
            return None

        logger.info("API token rejected, ending console session")
        request.console.end(request.session)
        messages.error(request, "Your session has expired. Please log in again.")
        login_url = reverse(settings.LOGIN_URL)
        return redirect(f"{login_url}?{urlencode({'next': request.get_full_path()})}")
