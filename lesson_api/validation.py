# validation.py

from collections import Counter

from lesson_api.errors import ValidationError
from lesson_api.schemas import OrderRequest

REQUIRED_TEXT_FIELDS = ("name", "phone_number", "address", "city", "state", "zip")


def is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class OrderValidator:
    """ Checks an order request for completeness and turns it into a demand map. """

    def validate(self, order: OrderRequest) -> dict[str, int]:
        """
        Return {lesson_id: spaces requested}, keyed in first-occurrence order.

        Repeating a lesson id in lessonIDs requests one more space of it.
        numberOfSpaces has to agree with the number of ids sent.
        """
        if any(is_blank(getattr(order, field)) for field in REQUIRED_TEXT_FIELDS):
            raise ValidationError("All fields are required.")
        if not order.lesson_ids or not order.number_of_spaces:
            raise ValidationError("All fields are required.")
        if any(is_blank(lesson_id) for lesson_id in order.lesson_ids):
            raise ValidationError("lessonIDs must not contain empty ids.")
        if order.number_of_spaces < 0:
            raise ValidationError("numberOfSpaces must be a positive integer.")
        if order.number_of_spaces != len(order.lesson_ids):
            raise ValidationError(
                f"numberOfSpaces ({order.number_of_spaces}) does not match "
                f"the number of lesson IDs ({len(order.lesson_ids)})."
            )

        return dict(Counter(order.lesson_ids))
