CATEGORY_URL_PREFIX = "/categories/"


def category_url(slug: str) -> str:
    return f"{CATEGORY_URL_PREFIX}{slug}"


def category_url_choices(categories):
    choices = [("", "None")]
    choices += [(c.slug, c.name) for c in categories if c.slug]
    return choices


def category_for_url(categories, url):
    """Category whose /categories/<slug> url matches, if any."""
    if not url or not url.startswith(CATEGORY_URL_PREFIX):
        return None
    slug = url[len(CATEGORY_URL_PREFIX):]
    return next((c for c in categories if c.slug == slug), None)
