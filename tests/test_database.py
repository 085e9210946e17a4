import logging

from sqlalchemy import text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from spot2go.database import Base, create_db_engine, enable_slow_query_logging
from spot2go.models import User


def test_in_memory_engine_is_shared_between_sessions():
    engine = create_db_engine("sqlite://")
    assert isinstance(engine.pool, StaticPool)

    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine)

    writer = Session()
    writer.add(User(name="Pat", email="pat@example.com", role="customer"))
    writer.commit()
    writer.close()

    reader = Session()
    try:
        assert reader.query(User).filter(User.email == "pat@example.com").count() == 1
    finally:
        reader.close()
        engine.dispose()


def test_file_sqlite_engine_uses_a_regular_pool(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'spot2go.db'}")
    try:
        assert not isinstance(engine.pool, StaticPool)
    finally:
        engine.dispose()


def test_slow_queries_are_logged(caplog):
    engine = create_db_engine("sqlite://")
    enable_slow_query_logging(engine, threshold=-1)

    with caplog.at_level(logging.WARNING, logger="spot2go.database"):
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    assert any("Slow query" in record.getMessage() for record in caplog.records)
    engine.dispose()
