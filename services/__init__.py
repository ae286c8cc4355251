"""
services/ - Business Logic Layer
================================
Services sit between the HTTP layer and the repositories and build
derived outputs (reports, exports) from repository results.
"""
