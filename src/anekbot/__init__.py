"""
Anekbot - random anek sampling bot for Discord

Anekbot continuously samples messages from a set of source channels, keeps the
ones that are plain text into a bounded pool, and serves random entries on
demand.

Core Components:

- **Item Pool**: Deduplicated, size-bounded store with oldest-first eviction
- **Source Crawler**: Random-position sampling of a source's history with a
  filter policy (plain text, no mentions, not blank)
- **Crawl Scheduler**: Sequential round-robin crawl loop across sources
- **Access Throttle**: Per-user cooldown on requests
- **Query Server**: Single-item and list requests exposed as /anek and /aneks
- **Interactive Console**: Status checks and graceful restart/shutdown

Usage:
    from anekbot.main import main
    main()  # Starts the bot with console interface
"""
