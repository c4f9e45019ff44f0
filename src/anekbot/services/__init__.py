"""
Service layer for the content cache.

- **content_cache_service.py**: Builds and owns the pool, source states,
  throttle, crawler and scheduler; the single object the cogs talk to.
- **query_service.py**: Throttled single-item and list requests over the pool.
"""
