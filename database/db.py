from sqlalchemy import create_engine               # SQLAlchemy engine factory
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from config.settings import settings               # ✅ environment-driven settings


def _engine_kwargs(url: str) -> dict:
    # SQLite (tests/local): share one connection across threads
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {"pool_pre_ping": True, "pool_recycle": 3600}


# ✅ engine built from the effective DB URL
engine = create_engine(settings.DB_URL, **_engine_kwargs(settings.DB_URL))

# ✅ session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ✅ declarative base for every model
Base = declarative_base()


# ✅ request-scoped session dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
