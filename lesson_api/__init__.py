"""Lesson Shop API: browse lessons and buy spaces without overselling them."""
