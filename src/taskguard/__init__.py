"""TaskGuard — stateless authentication and owner-scoped task storage.

Every request proves who it belongs to with a signed bearer token, and
every task read or write is constrained to the caller's own rows.
"""

__version__ = "0.1.0"
