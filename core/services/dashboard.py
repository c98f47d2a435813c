"""Dashboard figures.

The backend has no analytics endpoints yet, so the headline numbers and
charts are fixed sample data. Only the product monitor is live.
"""

from sales.records import Order

SAMPLE_STATS = {
    "total_products": 1247,
    "total_orders": 342,
    "total_users": 1289,
    "total_revenue": 45678.90,
    "pending_orders": 23,
    "low_stock_products": 12,
}

SAMPLE_RECENT_ORDERS = [
    {
        "id": 1,
        "orderNumber": "ORD-001",
        "userId": 1,
        "status": "pending",
        "totalAmount": 299.99,
        "shippingAmount": 10.00,
        "taxAmount": 30.00,
        "paymentStatus": "pending",
        "shippingAddress": {
            "firstName": "John", "lastName": "Doe", "address1": "123 Main St",
            "city": "New York", "state": "NY", "postalCode": "10001", "country": "US",
        },
        "createdAt": "2024-01-15T10:30:00Z",
    },
    {
        "id": 2,
        "orderNumber": "ORD-002",
        "userId": 2,
        "status": "processing",
        "totalAmount": 149.99,
        "shippingAmount": 10.00,
        "taxAmount": 15.00,
        "paymentStatus": "paid",
        "shippingAddress": {
            "firstName": "Jane", "lastName": "Smith", "address1": "456 Oak Ave",
            "city": "Los Angeles", "state": "CA", "postalCode": "90210", "country": "US",
        },
        "createdAt": "2024-01-14T14:20:00Z",
    },
]

SAMPLE_SALES = [
    {"date": "2024-01-01", "sales": 1200, "orders": 15},
    {"date": "2024-01-02", "sales": 1900, "orders": 22},
    {"date": "2024-01-03", "sales": 3000, "orders": 35},
    {"date": "2024-01-04", "sales": 2800, "orders": 28},
    {"date": "2024-01-05", "sales": 1890, "orders": 20},
    {"date": "2024-01-06", "sales": 2390, "orders": 26},
    {"date": "2024-01-07", "sales": 3490, "orders": 42},
]

SAMPLE_USER_GROWTH = [
    {"date": "2024-01-01", "users": 100},
    {"date": "2024-01-02", "users": 120},
    {"date": "2024-01-03", "users": 150},
    {"date": "2024-01-04", "users": 180},
    {"date": "2024-01-05", "users": 200},
    {"date": "2024-01-06", "users": 230},
    {"date": "2024-01-07", "users": 260},
]


def dashboard_stats() -> dict:
    return {
        **SAMPLE_STATS,
        "recent_orders": [Order.from_api(row) for row in SAMPLE_RECENT_ORDERS],
        "sales_data": list(SAMPLE_SALES),
        "user_growth": list(SAMPLE_USER_GROWTH),
    }
