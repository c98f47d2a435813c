from django.urls import reverse_lazy

SITE_HEADER = "Devotional Admin"
SITE_TITLE = "Devotional Admin"


def console_link(name: str):
    """
    name is a namespaced url name.
    Examples:
      core:dashboard
      catalog:product-list
      sales:order-list
    """
    return reverse_lazy(name)


SIDEBAR = {
    "navigation": [
        {
            "title": "Overview",
            "items": [
                {"title": "Dashboard", "icon": "dashboard", "link": console_link("core:dashboard")},
            ],
        },
        {
            "title": "Catalog",
            "collapsible": True,
            "items": [
                {"title": "Products", "icon": "inventory_2", "link": console_link("catalog:product-list")},
                {"title": "Low stock", "icon": "warning", "link": console_link("catalog:low-stock")},
                {"title": "Categories", "icon": "category", "link": console_link("catalog:category-list")},
                {"title": "Purposes", "icon": "sell", "link": console_link("catalog:purpose-list")},
            ],
        },
        {
            "title": "Sales",
            "collapsible": True,
            "items": [
                {"title": "Orders", "icon": "shopping_cart", "link": console_link("sales:order-list")},
            ],
        },
        {
            "title": "Users & Site",
            "collapsible": True,
            "items": [
                {"title": "Users", "icon": "manage_accounts", "link": console_link("customers:user-list")},
                {"title": "Menus", "icon": "account_tree", "link": console_link("core:menu-edit")},
            ],
        },
    ],
}
