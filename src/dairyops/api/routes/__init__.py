"""Route group exports."""

from . import customers, delivery_boys, health, jobs, orders, payments, products, reports

__all__ = ["customers", "delivery_boys", "health", "jobs", "orders", "payments", "products", "reports"]
