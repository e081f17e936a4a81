# orders.py

import json
import uuid
from datetime import datetime, timezone
from sqlite3 import Connection
from typing import Optional

from lesson_api.database import Database
from lesson_api.logger import log_info
from lesson_api.reservation import ReservedLine
from lesson_api.schemas import Order, OrderRequest


def expand_lesson_names(lesson_ids: list[str], reserved: list[ReservedLine]) -> list[str]:
    """ One title per purchased space, in the order the ids were requested. """
    titles = {line.lesson.id: line.lesson.title for line in reserved}
    return [titles[lesson_id] for lesson_id in lesson_ids]


class OrderRecorder:
    """ Persists finished orders. An order is written once and never changed. """

    def __init__(self, db: Database):
        self.db = db

    def record(
        self,
        order: OrderRequest,
        reserved: list[ReservedLine],
        conn: Optional[Connection] = None,
        request_id: str = "N/A",
    ) -> str:
        """
        Insert the order and its ledger lines in one transaction; return the order id.
        Pass `conn` to write inside the transaction that reserved the spaces.
        """
        order_id = uuid.uuid4().hex
        lesson_ids = [line.lesson.id for line in reserved]
        lesson_names = expand_lesson_names(order.lesson_ids, reserved)
        created_at = datetime.now(timezone.utc).isoformat()

        with self.db.transaction(conn) as conn:
            conn.execute(
                """
                INSERT INTO orders (order_id, name, phone_number, address, city, state, zip,
                                    lesson_ids, lesson_names, number_of_spaces, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    order_id, order.name, order.phone_number, order.address, order.city, order.state, order.zip,
                    json.dumps(lesson_ids), json.dumps(lesson_names), order.number_of_spaces, created_at,
                ),
            )
            conn.executemany(
                "INSERT INTO ledger (order_id, lesson_id, quantity) VALUES (?, ?, ?)",
                [(order_id, line.lesson.id, line.quantity) for line in reserved],
            )

        log_info(f"Order {order_id} written with {order.number_of_spaces} space(s).", request_id=request_id)
        return order_id

    def get_order(self, order_id: str) -> Optional[Order]:
        with self.db.read() as conn:
            row = conn.execute(
                """
                SELECT order_id, name, phone_number, address, city, state, zip,
                       lesson_ids, lesson_names, number_of_spaces, created_at
                FROM orders WHERE order_id = ?
                """,
                (order_id,),
            ).fetchone()
        if row is None:
            return None
        return Order(
            id=row["order_id"],
            name=row["name"],
            phone_number=row["phone_number"],
            address=row["address"],
            city=row["city"],
            state=row["state"],
            zip=row["zip"],
            lesson_ids=json.loads(row["lesson_ids"]),
            lesson_names=json.loads(row["lesson_names"]),
            number_of_spaces=row["number_of_spaces"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
