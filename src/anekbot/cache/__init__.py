"""
In-memory item storage.

- **item_pool.py**: The bounded, deduplicated pool of text items that the
  crawler fills and the request handlers sample from. Eviction is
  oldest-first and every operation runs under a single lock.
"""
