"""Order materialisation and creation services."""

from .creator import AutomaticOrderResult, create_automatic_orders, create_custom_order
from .materializer import MaterializedOrder, build_delivery_schedule, materialize_items, materialize_order
from .numbering import format_order_number, generate_order_number
from .status import transition_order_status

__all__ = [
    "AutomaticOrderResult",
    "MaterializedOrder",
    "build_delivery_schedule",
    "create_automatic_orders",
    "create_custom_order",
    "format_order_number",
    "generate_order_number",
    "materialize_items",
    "materialize_order",
    "transition_order_status",
]
