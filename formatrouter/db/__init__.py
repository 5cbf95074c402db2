"""Database connection and session management.

Example usage:
    ```python
    from formatrouter.config import get_settings
    from formatrouter.db import create_engine, create_session_factory, get_session

    engine = create_engine(get_settings())
    session_factory = create_session_factory(engine)

    async with get_session(session_factory) as session:
        session.add(record)

    await dispose_engine(engine)
    ```
"""

from formatrouter.db.base import (
    Base,
    create_engine,
    dispose_engine,
    init_db,
)
from formatrouter.db.session import (
    create_session_factory,
    get_session,
)

__all__ = [
    "Base",
    "create_engine",
    "init_db",
    "dispose_engine",
    "create_session_factory",
    "get_session",
]
