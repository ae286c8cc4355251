"""
api/ - Presentation Layer
=========================
FastAPI application and routers. Each endpoint validates the request,
calls the repository (or a service), and maps the typed result onto an
HTTP response. No SQL or business logic lives here.
"""
