"""Import all models to register them with SQLAlchemy metadata."""
from lusevarsel.models.base import Base
from lusevarsel.models.cache_slot import CacheSlot
