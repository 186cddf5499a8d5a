"""State layer.

Holds the only mutable state of the bridge: the per-register value cache
and the fan-speed negotiation. Both are owned by the coordinator loop and
never touched from another thread.
"""
