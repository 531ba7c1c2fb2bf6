"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from airtable_relay.api import create_app

    uvicorn --factory airtable_relay.api:create_app
"""

from airtable_relay.api.app import create_app

__all__ = ["create_app"]
