import pytest
from datetime import datetime
from app.application.loader import SeedLoader
from app.infrastructure.db import SessionLocal, create_db_engine
from app.infrastructure.schema import create_schema

# Anchor for the seed's relative timestamps so loads are repeatable
REFERENCE_TIME = datetime(2025, 9, 10, 12, 0, 0)

@pytest.fixture
def engine(tmp_path):
    # File-backed so every connection sees the same database
    engine = create_db_engine(f"sqlite:///{tmp_path / 'store.db'}", echo=False)
    yield engine
    engine.dispose()

@pytest.fixture
def schema_engine(engine):
    create_schema(engine)
    return engine

@pytest.fixture
def seeded_engine(schema_engine):
    SeedLoader(schema_engine, reference_time=REFERENCE_TIME).load()
    return schema_engine

@pytest.fixture
def db(seeded_engine):
    session = SessionLocal(bind=seeded_engine)
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def empty_db(schema_engine):
    session = SessionLocal(bind=schema_engine)
    try:
        yield session
    finally:
        session.close()
