"""
Runtime package for the Anon Relay server.

This package contains:
- API layer (FastAPI server + routes)
- Relay (request orchestration)
- Stores (sessions, message queues)
- Models (Pydantic models for sessions, messages and HTTP schemas)
"""
