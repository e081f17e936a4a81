# reservation.py

from dataclasses import dataclass
from sqlite3 import Connection
from typing import Optional

from lesson_api.errors import ConflictError, InsufficientInventoryError
from lesson_api.inventory import InventoryStore
from lesson_api.logger import log_debug, log_info, log_warning
from lesson_api.schemas import Lesson


@dataclass(slots=True)
class ReservedLine:
    lesson: Lesson
    quantity: int


class ReservationEngine:
    """
    Takes spaces for every line of an order, or for none of them.

    Availability read before the decrement is only used to fail fast. Every
    line is a conditional decrement, re-checked by the store against the latest
    value, and all lines run in one transaction: an error on any line rolls
    back the lines before it, so nothing has to be given back by hand.
    """

    def __init__(self, inventory: InventoryStore):
        self.inventory = inventory

    def reserve(
        self,
        demand: dict[str, int],
        lessons: list[Lesson],
        conn: Optional[Connection] = None,
        request_id: str = "N/A",
    ) -> list[ReservedLine]:
        """
        Reserve the demand map inside `conn`'s transaction, or in a transaction
        of its own when no connection is given.
        """
        lessons_by_id = {lesson.id: lesson for lesson in lessons}

        for lesson_id, needed in demand.items():
            lesson = lessons_by_id.get(lesson_id)
            if lesson is None:
                raise InsufficientInventoryError(lesson_id, lesson_id, needed, 0)
            if lesson.available_inventory < needed:
                raise InsufficientInventoryError(lesson_id, lesson.title, needed, lesson.available_inventory)
            log_debug(f"Lesson {lesson_id}: {needed} needed, {lesson.available_inventory} seen.", request_id=request_id)

        reserved: list[ReservedLine] = []
        with self.inventory.db.transaction(conn) as conn:
            for lesson_id, needed in demand.items():
                self._take(lessons_by_id[lesson_id], needed, conn, request_id)
                reserved.append(ReservedLine(lesson=lessons_by_id[lesson_id], quantity=needed))
        return reserved

    def _take(self, lesson: Lesson, needed: int, conn: Connection, request_id: str):
        """
        Conditionally decrement one line. On a conflict the lesson is re-read:
        too few spaces left is an InsufficientInventoryError with the fresh
        count, otherwise the decrement is retried once. A second conflict is
        raised as ConflictError (HTTP 409) so the client can retry the order.
        """
        try:
            self.inventory.conditional_decrement(lesson.id, needed, conn=conn)
        except ConflictError:
            log_warning(f"Conflict reserving {needed} of lesson {lesson.id}, re-checking.", request_id=request_id)
            current = self.inventory.get_lesson(lesson.id, conn=conn)
            available = current.available_inventory if current else 0
            if available < needed:
                raise InsufficientInventoryError(lesson.id, lesson.title, needed, available)
            self.inventory.conditional_decrement(lesson.id, needed, conn=conn)
        log_info(f"Reserved {needed} space(s) of lesson {lesson.id}.", request_id=request_id)
