"""
API server package — HTTP/REST interface over the user registry.

Every request runs through the middleware pipeline (error, auth, logging)
before the user handlers. Handlers delegate storage to the registry.
"""
