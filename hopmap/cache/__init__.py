from hopmap.cache.location_cache import LocationCache

__all__ = ["LocationCache"]
