"""
Core — shared exception taxonomy used by the registry, handlers and middleware.
"""
