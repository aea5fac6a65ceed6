"""Orphanage Admin backend: identity records, credentials, and the HTTP API."""
