# errors.py

# Error taxonomy shared by the order placement path and the HTTP boundary.
# Each error knows the status code and category it maps to at the boundary.


class LessonApiError(Exception):
    status_code = 500
    category = "internal"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"error": self.message, "category": self.category}


class ValidationError(LessonApiError):
    """ Missing or malformed request fields. """
    status_code = 400
    category = "validation"


class NotFoundError(LessonApiError):
    """ Referenced lesson or order does not exist. """
    status_code = 404
    category = "not_found"


class InsufficientInventoryError(LessonApiError):
    """ Demand exceeds the available spaces of at least one lesson. """
    status_code = 400
    category = "insufficient_inventory"

    def __init__(self, lesson_id: str, title: str, requested: int, available: int):
        super().__init__(f"Not enough spaces for '{title}'. Needed: {requested}, Available: {available}")
        self.lesson_id = lesson_id
        self.title = title
        self.requested = requested
        self.available = available


class ConflictError(LessonApiError):
    """ A conditional store update lost a race with a concurrent writer. """
    status_code = 409
    category = "conflict"


class StorageError(LessonApiError):
    """ The underlying store failed. The detail is logged, never sent to clients. """
    status_code = 500
    category = "storage"

    def to_response(self) -> dict:
        return {"error": "Internal Server Error", "category": self.category}
