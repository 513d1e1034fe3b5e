from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import DATABASE_URL

# SQLite connections are shared across the threadpool FastAPI runs sync routes in
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db():
    """Create the users and tasks tables if they do not exist yet."""
    # Register both models on Base.metadata before create_all
    import models  # noqa: F401
    import task_models  # noqa: F401

    Base.metadata.create_all(bind=engine)
