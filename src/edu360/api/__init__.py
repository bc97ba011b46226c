"""EDU360 HTTP API."""
