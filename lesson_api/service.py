# service.py

from typing import Optional

from lesson_api.errors import LessonApiError, ValidationError
from lesson_api.inventory import InventoryStore
from lesson_api.logger import log_info, log_warning
from lesson_api.orders import OrderRecorder
from lesson_api.reservation import ReservationEngine
from lesson_api.schemas import OrderRequest
from lesson_api.validation import OrderValidator


class OrderPlacementService:
    """
    Places an order: validate, read the lessons, reserve spaces, record.

    Reserving and recording share one transaction and commit together, so on
    any failure no lesson capacity has changed and no order exists.
    """

    def __init__(
        self,
        inventory: InventoryStore,
        recorder: OrderRecorder,
        validator: Optional[OrderValidator] = None,
        engine: Optional[ReservationEngine] = None,
    ):
        self.inventory = inventory
        self.recorder = recorder
        self.validator = validator or OrderValidator()
        self.engine = engine or ReservationEngine(inventory)

    def place_order(self, order: OrderRequest, request_id: str = "N/A") -> str:
        try:
            demand = self.validator.validate(order)
        except ValidationError as e:
            log_warning(f"Order rejected: {e.message}", request_id=request_id)
            raise

        lessons = self.inventory.batch_read(demand.keys())

        try:
            with self.inventory.db.transaction() as conn:
                reserved = self.engine.reserve(demand, lessons, conn=conn, request_id=request_id)
                order_id = self.recorder.record(order, reserved, conn=conn, request_id=request_id)
        except LessonApiError as e:
            log_warning(f"Order rolled back ({e.category}): {e.message}", request_id=request_id)
            raise

        log_info(f"Order {order_id} placed.", request_id=request_id)
        return order_id
