"""Casbin engine integration: row codec, filters and the SQL database adapter."""
