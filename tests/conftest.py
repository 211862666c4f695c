"""
Shared fixtures for league engine tests
Each test gets its own SQLite file under pytest's tmp_path.
"""

import pytest
import pytest_asyncio

from database.models import Database
from systems.league_engine import LeagueEngine

ADMIN_ID = 9000


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(str(tmp_path / 'league.db'))
    await db.initialize()
    return db


@pytest_asyncio.fixture
async def engine(database):
    league = LeagueEngine(database)
    await database.add_admin(ADMIN_ID)
    return league


@pytest.fixture
def admin_id():
    return ADMIN_ID


@pytest.fixture
def make_fighter(database):
    """Create a fighter, optionally already holding points and a tier"""
    async def _make(user_id, name, points=0, tier=None, weight_class='Lightweight'):
        await database.create_fighter(user_id, name, weight_class)
        if points or tier:
            await database.update_fighter(user_id, points=points, tier=tier or 'Amateur')
        return await database.get_fighter(user_id)
    return _make
