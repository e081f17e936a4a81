# inventory.py

import math
import uuid
from sqlite3 import Connection
from typing import Iterable, Optional

from lesson_api.database import Database
from lesson_api.errors import ConflictError, NotFoundError, ValidationError
from lesson_api.schemas import Lesson, LessonUpdate, NewLesson

LESSON_COLUMNS = "id, title, location, price, available_inventory, description, continent, image"

# LessonUpdate field -> column; anything not listed here can never be overwritten
UPDATABLE_COLUMNS = {
    "title": "title",
    "location": "location",
    "price": "price",
    "description": "description",
    "continent": "continent",
    "image": "image",
}


def row_to_lesson(row) -> Lesson:
    return Lesson(
        id=row["id"],
        title=row["title"],
        location=row["location"],
        price=row["price"],
        available_inventory=row["available_inventory"],
        description=row["description"],
        continent=row["continent"],
        image=row["image"],
    )


def parse_number(query: str) -> Optional[float]:
    """ Return the query as a finite number, or None if it is not one. """
    try:
        value = float(query)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class InventoryStore:
    """
    Durable lesson records.

    Capacity only changes through conditional_decrement, which refuses to go
    below zero at commit time.
    """

    def __init__(self, db: Database):
        self.db = db

    def list_lessons(self) -> list[Lesson]:
        with self.db.read() as conn:
            rows = conn.execute(f"SELECT {LESSON_COLUMNS} FROM lessons ORDER BY rowid").fetchall()
        return [row_to_lesson(row) for row in rows]

    def get_lesson(self, lesson_id: str, conn: Optional[Connection] = None) -> Optional[Lesson]:
        with self.db.read(conn) as conn:
            row = conn.execute(f"SELECT {LESSON_COLUMNS} FROM lessons WHERE id = ?", (lesson_id,)).fetchone()
        return row_to_lesson(row) if row else None

    def batch_read(self, lesson_ids: Iterable[str]) -> list[Lesson]:
        """ Read the given lessons. Unknown ids are silently left out of the result. """
        ids = list(dict.fromkeys(lesson_ids))
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        with self.db.read() as conn:
            rows = conn.execute(
                f"SELECT {LESSON_COLUMNS} FROM lessons WHERE id IN ({placeholders}) ORDER BY rowid",
                ids,
            ).fetchall()
        return [row_to_lesson(row) for row in rows]

    def search_lessons(self, query: str) -> list[Lesson]:
        """
        Case-insensitive substring match on title or location. If the query is
        a number, lessons whose price or available inventory equal it match too.
        An empty query returns every lesson.
        """
        query = (query or "").strip()
        if not query:
            return self.list_lessons()

        pattern = f"%{escape_like(query.casefold())}%"
        clauses = ["casefold(title) LIKE ? ESCAPE '\\'", "casefold(location) LIKE ? ESCAPE '\\'"]
        params: list = [pattern, pattern]
        number = parse_number(query)
        if number is not None:
            clauses += ["price = ?", "available_inventory = ?"]
            params += [number, number]

        with self.db.read() as conn:
            rows = conn.execute(
                f"SELECT {LESSON_COLUMNS} FROM lessons WHERE {' OR '.join(clauses)} ORDER BY rowid",
                params,
            ).fetchall()
        return [row_to_lesson(row) for row in rows]

    def insert_lessons(self, lessons: Iterable[NewLesson]) -> list[Lesson]:
        """ Insert new lessons in one transaction and return them with their ids. """
        created = [Lesson(id=uuid.uuid4().hex, **lesson.model_dump(exclude={"id"})) for lesson in lessons]
        with self.db.transaction() as conn:
            conn.executemany(
                f"INSERT INTO lessons ({LESSON_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                [
                    (c.id, c.title, c.location, c.price, c.available_inventory, c.description, c.continent, c.image)
                    for c in created
                ],
            )
        return created

    def update_lesson(self, lesson_id: str, update: LessonUpdate) -> Lesson:
        """ Overwrite whitelisted fields of a lesson and return the updated lesson. """
        fields = update.model_dump(exclude_unset=True)
        fields = {name: value for name, value in fields.items() if value is not None}
        if not fields:
            raise ValidationError("No updatable fields supplied.")

        assignments = ", ".join(f"{UPDATABLE_COLUMNS[name]} = ?" for name in fields)
        with self.db.transaction() as conn:
            cursor = conn.execute(
                f"UPDATE lessons SET {assignments} WHERE id = ?",
                [*fields.values(), lesson_id],
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Lesson not found.")
            row = conn.execute(f"SELECT {LESSON_COLUMNS} FROM lessons WHERE id = ?", (lesson_id,)).fetchone()
        return row_to_lesson(row)

    def conditional_decrement(self, lesson_id: str, amount: int, conn: Optional[Connection] = None):
        """
        Take `amount` spaces from a lesson only if at least that many remain
        at commit time. Raises ConflictError when the condition does not hold.
        Pass `conn` to run inside an open transaction, which the error rolls back.
        """
        with self.db.transaction(conn) as conn:
            cursor = conn.execute(
                """
                UPDATE lessons SET available_inventory = available_inventory - ?
                WHERE id = ? AND available_inventory >= ?
                """,
                (amount, lesson_id, amount),
            )
            if cursor.rowcount == 0:
                raise ConflictError(f"Lesson {lesson_id} no longer has {amount} spaces available.")

