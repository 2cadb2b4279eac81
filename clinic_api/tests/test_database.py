from sqlalchemy.pool import StaticPool

from clinic_api.database import MAX_OVERFLOW, POOL_SIZE, _engine_options


def test_in_memory_sqlite_shares_one_connection():
    options = _engine_options("sqlite://")

    assert options["poolclass"] is StaticPool
    assert options["connect_args"] == {"check_same_thread": False}


def test_file_sqlite_uses_default_pool():
    options = _engine_options("sqlite:///./clinic.db")

    assert "poolclass" not in options
    assert "pool_size" not in options


def test_server_database_gets_pool_settings():
    options = _engine_options("postgresql://clinic@localhost/clinic")

    assert options["pool_pre_ping"] is True
    assert options["pool_size"] == POOL_SIZE
    assert options["max_overflow"] == MAX_OVERFLOW
