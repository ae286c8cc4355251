"""
db/ - Database Layer
====================
Connection handling, the SQL statement catalog, row mapping and schema
initialization for PostgreSQL.
This layer is the lowest in the architecture and has no dependencies on other layers
(apart from the domain models it maps rows into).
"""
