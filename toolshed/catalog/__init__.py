"""
Catalog package for the tool shed.

This package holds the record schema, the pure collection transforms,
the search helpers, the spreadsheet import/export mapping and the two
routers built on top of them: a public listing that anyone can browse
and an admin surface, behind a shared secret, that edits the
collection.
"""

from .admin import router as admin_router  # noqa: F401
from .router import router as catalog_router  # noqa: F401
