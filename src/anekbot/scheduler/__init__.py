"""
Background scheduling for the content cache.

- **crawl_scheduler.py**: Sequential round-robin loop that runs one crawl per
  source with an inter-source delay, then pauses between full passes.
  Source failures are isolated: configuration errors disable the source,
  transient errors are retried on the next pass.
"""
