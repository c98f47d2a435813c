import logging

from django.shortcuts import render
from django.utils import timezone

from catalog.services import inventory_snapshot, list_products
from core.permissions import console_login_required
from core.services.api import ApiAuthError, api_client_for
from core.services.dashboard import dashboard_stats

logger = logging.getLogger(__name__)

MONITOR_LIMIT = 100


@console_login_required
def dashboard(request):
    stats = dashboard_stats()

    monitor = inventory_snapshot([])
    monitor_ok = True
    try:
        page = list_products(api_client_for(request), {"limit": MONITOR_LIMIT})
        monitor = inventory_snapshot(page.items)
    except ApiAuthError:
        raise
    except Exception:
        logger.exception("Product monitor refresh failed")
        monitor_ok = False

    context = {
        **stats,
        "monitor": monitor,
        "monitor_ok": monitor_ok,
        "monitor_updated": timezone.now(),
    }
    return render(request, "core/dashboard.html", context)
