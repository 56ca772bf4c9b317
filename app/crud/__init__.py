"""
CRUD operations (Create, Read, Update, Delete) for database tables.

Routes call into this layer instead of touching SQL; each module issues
positionally bound statements through app.core.database.run_query.
"""

from app.crud import job, sql

__all__ = ["job", "sql"]
