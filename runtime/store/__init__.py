"""
Storage abstractions for the Anon Relay runtime.

Includes:
- SessionStore: in-memory sessions, ended-set and token validation
- MessageQueueStore: per-session FIFO queues drained on poll
"""
