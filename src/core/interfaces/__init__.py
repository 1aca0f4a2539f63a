"""Core interfaces.

Protocols that concrete adapters implement, so the core depends on
abstractions only.
"""
