# attendguard/db/session.py
import os
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from attendguard.core.config import settings

def _normalize(url: str) -> str:
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url and url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url

SQLALCHEMY_DATABASE_URL = _normalize(settings.DATABASE_URL)

if SQLALCHEMY_DATABASE_URL.startswith("sqlite:///") and ":memory:" not in SQLALCHEMY_DATABASE_URL:
    # sqlite não cria o diretório sozinho
    os.makedirs(os.path.dirname(os.path.abspath(SQLALCHEMY_DATABASE_URL[len("sqlite:///"):])), exist_ok=True)

engine = create_engine(SQLALCHEMY_DATABASE_URL, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
