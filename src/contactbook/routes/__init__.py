from . import lookups, organizations, persons

__all__ = ["lookups", "organizations", "persons"]
