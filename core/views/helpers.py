from django.contrib import messages
from django.utils.http import url_has_allowed_host_and_scheme

from core.services.api import ApiAuthError, ApiError


def report_api_error(request, exc: ApiError):
    """Flash an API failure; auth failures go up to ConsoleSessionMiddleware."""
    if isinstance(exc, ApiAuthError):
        raise exc
    messages.error(request, exc.message)


def fetch_or_default(request, loader, *args, default=None, **kwargs):
    """Run a read; on failure flash the error and return ``default`` ([] if unset)."""
    try:
        return loader(*args, **kwargs)
    except ApiError as exc:
        report_api_error(request, exc)
        return [] if default is None else default


def selected_ids(request, field="ids"):
    ids = []
    for raw in request.POST.getlist(field):
        try:
            ids.append(int(raw))
        except ValueError:
            continue
    return ids


def next_url(request, default=None):
    """``next`` from POST/GET when it points back at this site."""
    target = request.POST.get("next") or request.GET.get("next")
    if target and url_has_allowed_host_and_scheme(target, allowed_hosts={request.get_host()}):
        return target
    return default
