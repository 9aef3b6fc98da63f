"""
Request orchestration for the relay.

- SessionRelay: create/end/status/submit/poll on top of the stores
"""
