from config import menu as console_menu


def base_context_processor(request):
    console = getattr(request, "console", None)
    if console is None or not console.is_authenticated:
        return {"site_title": console_menu.SITE_TITLE}

    return {
        "site_title": console_menu.SITE_TITLE,
        "site_header": console_menu.SITE_HEADER,
        "navigation": console_menu.SIDEBAR["navigation"],
        "console_user": console.user,
    }
