from stockledger.database.base import Base
from stockledger.database.engine import build_engine, engine
from stockledger.database.session import SessionLocal

__all__ = ["Base", "SessionLocal", "build_engine", "engine"]
