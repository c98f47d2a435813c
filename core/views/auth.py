import logging

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from core.forms.auth_forms import LoginForm
from core.services.api import ApiError
from core.services.auth import login
from core.views.helpers import next_url

logger = logging.getLogger(__name__)


def login_view(request):
    if request.console.is_authenticated:
        return redirect(settings.LOGIN_REDIRECT_URL)

    if request.method == "POST":
        form = LoginForm(request.POST)
        if form.is_valid():
            try:
                token, user = login(form.cleaned_data["email"], form.cleaned_data["password"])
            except ApiError as exc:
                logger.info("Login failed for %s: %s", form.cleaned_data["email"], exc.message)
                messages.error(request, exc.message or "Login failed")
            else:
                request.console.start(request.session, token, user)
                messages.success(request, "Login successful!")
                return redirect(next_url(request, settings.LOGIN_REDIRECT_URL))
    else:
        form = LoginForm()

    return render(request, "core/login.html", {"form": form, "next": next_url(request, "")})


@require_POST
def logout_view(request):
    request.console.end(request.session)
    messages.success(request, "Logged out.")
    return redirect(settings.LOGIN_URL)
