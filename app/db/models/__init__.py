from app.db.models.article import Article
from app.db.models.event import Event

__all__ = ["Article", "Event"]
