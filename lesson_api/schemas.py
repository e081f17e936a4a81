# schemas.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Pydantic models for requests, responses, and stored records.
# Wire names follow the catalog client (camelCase aliases).

class NewLesson(BaseModel):
    # Fields needed to create a lesson (catalog seeding)
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, examples=["Spanish"])
    location: str = Field(..., min_length=1, examples=["MADRID"])
    price: float = Field(..., ge=0, examples=[1800])
    available_inventory: int = Field(..., ge=0, alias="availableInventory", examples=[7])
    description: str = Field("", examples=["Learn Spanish dialects."])
    continent: str = Field("", examples=["Europe"])
    image: str = Field("", examples=["images/spanishflag.webp"])

class Lesson(NewLesson):
    # Stored lesson, as returned to clients
    id: str = Field(..., examples=["3f1c0a7e9b2d4c6f8e0a1b2c3d4e5f60"])

class LessonUpdate(BaseModel):
    # Only these fields may be overwritten; availableInventory is owned by the reservation path
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    continent: Optional[str] = None
    image: Optional[str] = None

class LessonUpdateResponse(BaseModel):
    message: str = Field(..., examples=["Lesson updated."])
    lesson: Lesson

class SeedResponse(BaseModel):
    inserted: int = Field(..., examples=[5])

class OrderRequest(BaseModel):
    # Fields that client sends in Request. Completeness is checked by the
    # order validator so that a missing field is a 400, not a schema error.
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, examples=["Ada Lovelace"])
    phone_number: Optional[str] = Field(None, alias="phoneNumber", examples=["07700900123"])
    address: Optional[str] = Field(None, examples=["12 Analytical Row"])
    city: Optional[str] = Field(None, examples=["London"])
    state: Optional[str] = Field(None, examples=["Greater London"])
    zip: Optional[str] = Field(None, examples=["NW1 6XE"])
    lesson_ids: Optional[list[str]] = Field(None, alias="lessonIDs", examples=[["lesson-a", "lesson-a"]])
    number_of_spaces: Optional[int] = Field(None, alias="numberOfSpaces", examples=[2])

class OrderResponse(BaseModel):
    # Fields that appear in Response body
    message: str = Field(..., examples=["Order saved and inventory updated."])
    order_id: str = Field(..., alias="orderId", examples=["abc123"])

class Order(BaseModel):
    # Stored order, immutable once recorded
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    phone_number: str = Field(..., alias="phoneNumber")
    address: str
    city: str
    state: str
    zip: str
    lesson_ids: list[str] = Field(..., alias="lessonIDs")
    lesson_names: list[str] = Field(..., alias="lessonNames")
    number_of_spaces: int = Field(..., alias="numberOfSpaces")
    created_at: datetime = Field(..., alias="createdAt")
