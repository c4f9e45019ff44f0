"""
Source crawling for the content cache.

- **source_client.py**: Protocol for the remote history API (resolve, extent, fetch).
- **discord_source_client.py**: Discord implementation addressing messages by
  snowflake offset.
- **filters.py**: Item filter policy (plain text, no mentions, not blank).
- **source_crawler.py**: One random-sampling pass per call, feeding the item pool.
"""
