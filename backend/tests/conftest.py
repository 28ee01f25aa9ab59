import asyncio
import os
import tempfile
from pathlib import Path

import pytest

# Point the application at a throwaway database before subtrans is imported
_DB_DIR = Path(tempfile.mkdtemp(prefix="subtrans-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR / 'app.db'}"
os.environ.pop("API_AUTH_TOKEN", None)

from subtrans.core.cache import CacheStore  # noqa: E402
from subtrans.models.database.base import (  # noqa: E402
    create_engine,
    create_session_maker,
    init_db,
)


@pytest.fixture
def store(tmp_path: Path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'cache.db'}")
    asyncio.run(init_db(bind=engine))
    yield CacheStore(create_session_maker(engine))
    asyncio.run(engine.dispose())
