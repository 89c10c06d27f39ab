"""FastAPI routers acting as controllers in the MVC architecture."""

from . import translate

__all__ = ["translate"]
