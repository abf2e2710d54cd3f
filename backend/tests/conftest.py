import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskboard.core.database import build_engine, init_models
from taskboard.core.policy import CurrentUser, Role
from taskboard.models.user import User
from taskboard.services.projects import ProjectAccess
from taskboard.services.tasks import TaskAccess

PEOPLE = [
    ("admin", "Ada Admin", Role.admin),
    ("manager", "Mia Manager", Role.manager),
    ("other_manager", "Otto Manager", Role.manager),
    ("alice", "Alice Member", Role.member),
    ("bob", "Bob Member", Role.member),
]


@pytest_asyncio.fixture
async def engine():
    engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def people(db):
    """Acting users keyed by nickname: admin, manager, other_manager, alice, bob."""
    users = {}
    for key, name, role in PEOPLE:
        user = User(name=name, email=f"{key}@taskboard.io", hashed_password="!", role=role.value)
        db.add(user)
        users[key] = user
    await db.commit()
    return {key: CurrentUser(id=user.id, role=Role(user.role)) for key, user in users.items()}


@pytest.fixture
def projects(db):
    return ProjectAccess(db)


@pytest.fixture
def tasks(db, projects):
    return TaskAccess(db, projects)


@pytest_asyncio.fixture
async def launch(projects, people):
    """Project created by ``manager`` with alice as the only team member."""
    return await projects.create(people["manager"], {
        "name": "Launch",
        "description": "Ship the first release",
        "team_members": [people["alice"].id],
    })
