from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from evalhub.shared.config import settings

def _default_url() -> str:
    # Local SQLite DB under ./storage/ (created if missing)
    root = Path(__file__).resolve().parents[2]   # project root
    storage_dir = root / "storage"
    storage_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{(storage_dir / 'evalhub.db').as_posix()}"

DB_URL = settings.DATABASE_URL or _default_url()

connect_args = {"check_same_thread": False} if DB_URL.startswith("sqlite") else {}
engine = create_engine(DB_URL, connect_args=connect_args)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

class Base(DeclarativeBase):
    pass

# FastAPI dep
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
