"""
Core utilities shared across the eventdesk API.

This package hosts configuration, logging setup and security helpers.
Routers and services depend on these primitives instead of reading the
environment or configuring handlers themselves.
"""
