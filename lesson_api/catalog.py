# catalog.py

from lesson_api.inventory import InventoryStore
from lesson_api.logger import log_info
from lesson_api.schemas import NewLesson

# Demo lessons loaded by POST /api/seed
SAMPLE_LESSONS = [
    NewLesson(title="English Language", location="BIRMINGHAM", price=2000, available_inventory=7,
              description="Dive in and uplift your English literature.", continent="Europe", image="images/ukflag.webp"),
    NewLesson(title="French", location="PARIS", price=1800, available_inventory=5,
              description="Learn rich French dialects.", continent="Europe", image="images/frenchflag.webp"),
    NewLesson(title="Spanish", location="MADRID", price=1800, available_inventory=7,
              description="Learn Spanish dialects.", continent="Europe", image="images/spanishflag.webp"),
    NewLesson(title="Chinese", location="HONG-KONG", price=1800, available_inventory=10,
              description="Learn Chinese dialects.", continent="Asia", image="images/chineseflag.webp"),
    NewLesson(title="Mauritian Creole", location="Flic-en-Flac", price=1500, available_inventory=10,
              description="Learn Mauritian dialects.", continent="Africa", image="images/mauritiusflag.webp"),
]


def seed_catalog(inventory: InventoryStore, request_id: str = "N/A") -> int:
    """ Insert the sample lessons and return how many were inserted. """
    inserted = inventory.insert_lessons(SAMPLE_LESSONS)
    log_info(f"Seeded {len(inserted)} lessons.", request_id=request_id)
    return len(inserted)
