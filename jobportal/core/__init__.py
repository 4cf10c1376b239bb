"""Core module - settings, auth, tokens, retry, middleware and error handlers."""
