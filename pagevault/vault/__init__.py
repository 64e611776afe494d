"""Page vault service: proxy, logic builds, persistence and HTTP API."""
