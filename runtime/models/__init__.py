"""
Pydantic models used by the Anon Relay runtime.

Split into:
- session_models: Session + Message
- api_models: HTTP request/response schemas
"""
