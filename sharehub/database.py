from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool


def _sqlite_immediate_transactions(engine) -> None:
    # SQLite ignora SELECT ... FOR UPDATE: cada transação pega o lock de escrita no BEGIN
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def make_engine(database_url: str):
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # SQLite em memória: todas as threads precisam da mesma conexão
        if database_url in ("sqlite://", "sqlite:///:memory:") or ":memory:" in database_url:
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, **kwargs)
        _sqlite_immediate_transactions(engine)
        return engine
    return create_engine(database_url, pool_pre_ping=True)


def make_session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    db: Session = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
