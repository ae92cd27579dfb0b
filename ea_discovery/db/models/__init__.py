"""Re-export all models so Base.metadata sees them."""

from ea_discovery.db.models.engagement import Engagement

__all__ = ["Engagement"]
