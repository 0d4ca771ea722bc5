"""Request-scoped access to the directory store.

The engine lives on ``app.state.engine`` (set by ``api.main.create_app``);
handlers receive it through ``Depends(get_engine)`` and open one transaction
per request with ``db.database.transaction``.
"""
from fastapi import Request
from sqlalchemy.engine import Engine


def get_engine(request: Request) -> Engine:
    return request.app.state.engine
