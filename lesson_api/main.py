# main.py

import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lesson_api.catalog import seed_catalog
from lesson_api.config import get_settings
from lesson_api.database import Database, create_tables
from lesson_api.errors import LessonApiError, NotFoundError, StorageError
from lesson_api.inventory import InventoryStore
from lesson_api.logger import log_error, log_info, log_warning, set_log_level
from lesson_api.orders import OrderRecorder
from lesson_api.schemas import (
    Lesson, LessonUpdate, LessonUpdateResponse, Order, OrderRequest, OrderResponse, SeedResponse,
)
from lesson_api.service import OrderPlacementService


# Open the database, create tables on startup, and build the stores the endpoints use
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Set up the database handle and the stores on startup.
    Drop them on shutdown.
    """
    settings = get_settings()
    set_log_level(settings.log_level)

    log_info(f"Opening database {settings.db_file} and creating tables...")
    db = Database(settings.db_file, timeout=settings.db_timeout_seconds)
    create_tables(db)

    # explicit handles, passed into each component
    inventory = InventoryStore(db)
    recorder = OrderRecorder(db)
    app.state.inventory = inventory
    app.state.recorder = recorder
    app.state.placement = OrderPlacementService(inventory, recorder)
    log_info("Starting up the Lesson Shop API...")

    yield
    log_info("Shutting down the Lesson Shop API...")
    app.state.placement = None
    app.state.recorder = None
    app.state.inventory = None


# Initialize FastAPI app with lifespan for startup and shutdown events
app = FastAPI(title="Lesson Shop API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Set up a middleware to generate request_id for each request and log it
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """
    Generate a unique request_id for each incoming request and log it for tracing.
    """
    # if request id exists in headers, use it, otherwise generate a new one
    request_id = request.headers.get("Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    log_info(f"Received request: {request.method} {request.url.path}", request_id=request_id)

    response = await call_next(request)
    # add the request_id to the response headers for tracking
    response.headers["Request-ID"] = request_id
    log_info(f"Completed request: {request.method} {request.url.path} with status {response.status_code}", request_id=request_id)
    return response


def request_id_of(request: Request) -> str:
    return getattr(request.state, "request_id", "N/A")


# Map domain errors, schema errors, and anything unexpected onto JSON responses
@app.exception_handler(LessonApiError)
async def lesson_api_error_handler(request: Request, exc: LessonApiError):
    if isinstance(exc, StorageError):
        log_error(f"Storage error on {request.url.path}: {exc.message}", request_id=request_id_of(request))
    else:
        log_warning(f"{exc.category} on {request.url.path}: {exc.message}", request_id=request_id_of(request))
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    log_warning(f"Invalid request body on {request.url.path}: {details}", request_id=request_id_of(request))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body.", "category": "validation", "details": details},
    )

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # never echo internal error text to clients
    log_error(f"Unhandled exception on {request.url.path}: {exc!r}", request_id=request_id_of(request))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error", "category": "internal"},
    )


@app.get("/health")
def health():
    return {"status": "ok"}

# API: /api/lessons - GET all lessons
@app.get("/api/lessons", response_model=list[Lesson])
def list_lessons(request: Request):
    """
    Return every lesson in the catalog.
    """
    return request.app.state.inventory.list_lessons()

# API: /api/lessons/{lesson_id} - GET one lesson
@app.get("/api/lessons/{lesson_id}", response_model=Lesson)
def read_lesson(request: Request, lesson_id: str):
    """
    Retrieve a specific lesson by id.
    """
    lesson = request.app.state.inventory.get_lesson(lesson_id)
    # if lesson not found, return 404 error
    if lesson is None:
        raise NotFoundError("Lesson not found")
    return lesson

# API: /api/search?q= - GET lessons matching a free-text query
@app.get("/api/search", response_model=list[Lesson])
def search_lessons(request: Request, q: str = ""):
    """
    Match title or location (case-insensitive), or price / spaces when q is a number.
    An empty query returns all lessons.
    """
    return request.app.state.inventory.search_lessons(q)

# API: /api/seed - POST to load the sample lessons
@app.post("/api/seed", response_model=SeedResponse)
def seed(request: Request):
    inserted = seed_catalog(request.app.state.inventory, request_id=request_id_of(request))
    return SeedResponse(inserted=inserted)

# API: /api/orders - POST to place a new order
@app.post("/api/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(request: Request, order: OrderRequest):
    """
    Place a new order.

    Spaces are reserved for every requested lesson or for none of them, and the
    order is only recorded once every space is reserved. Retrying a failed
    request is safe for inventory; retrying after an ambiguous network failure
    may record the order twice.
    """
    order_id = request.app.state.placement.place_order(order, request_id=request_id_of(request))
    return OrderResponse(message="Order saved and inventory updated.", orderId=order_id)

# API: /api/orders/{order_id} - GET to read a specific order
@app.get("/api/orders/{order_id}", response_model=Order)
def read_order(request: Request, order_id: str):
    """
    Retrieve a specific order by order_id.
    """
    log_info(f"Reading order: {order_id}", request_id=request_id_of(request))
    order = request.app.state.recorder.get_order(order_id)
    if order is None:
        raise NotFoundError("Order not found.")
    return order

# API: /api/lessons/{lesson_id} - PUT to overwrite whitelisted lesson fields
@app.put("/api/lessons/{lesson_id}", response_model=LessonUpdateResponse)
def update_lesson(request: Request, lesson_id: str, update: LessonUpdate):
    """
    Update title, location, price, description, continent, or image of a lesson.
    availableInventory cannot be set here; it only changes through orders.
    """
    lesson = request.app.state.inventory.update_lesson(lesson_id, update)
    log_info(f"Lesson {lesson_id} updated: {sorted(update.model_fields_set)}", request_id=request_id_of(request))
    return LessonUpdateResponse(message="Lesson updated.", lesson=lesson)


def run():
    """ Console entry point: serve the API with uvicorn. """
    settings = get_settings()
    uvicorn.run("lesson_api.main:app", host=settings.host, port=settings.port)
