"""
notecache.

- backend/: Note model, cached repository, service layer, HTTP API, configuration
"""
