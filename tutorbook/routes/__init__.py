# tutorbook/routes/__init__.py
"""HTTP routers, one module per resource."""

from . import auth, bookings, doubts, health, metrics, tutors

__all__ = ["auth", "bookings", "doubts", "health", "metrics", "tutors"]
