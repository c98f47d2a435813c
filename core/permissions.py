"""Access checks for console views.

Authentication lives in the commerce API, so Django's own ``login_required``
(which needs ``django.contrib.auth``) is replaced by these helpers reading
``request.console``.
"""

from functools import wraps

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect
from django.urls import reverse
from django.utils.http import urlencode


def console_login_required(view):
    """Redirect to the login page unless the console session is ready."""

    @wraps(view)
    def wrapper(request, *args, **kwargs):
        console = getattr(request, "console", None)
        if console is None or not console.is_authenticated:
            login_url = reverse(settings.LOGIN_URL)
            return redirect(f"{login_url}?{urlencode({'next': request.get_full_path()})}")
        return view(request, *args, **kwargs)

    return wrapper


def superadmin_required(view):
    """Like console_login_required, but only for superadmins."""

    @console_login_required
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if not request.console.is_superadmin:
            messages.error(request, "Only superadmins can do that.")
            return redirect("core:dashboard")
        return view(request, *args, **kwargs)

    return wrapper
