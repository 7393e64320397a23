# shop_checkout/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from shop_checkout.utils.settings import DATABASE_URL, STORE_TIMEOUT_SECONDS

Base = declarative_base()


def build_engine(url: str = DATABASE_URL) -> Engine:
    """
    Engine z ograniczonym czasem oczekiwania na połączenie.
    Schemat (orders, order_items) zakłada zewnętrzna migracja, tu nic nie tworzymy.
    """
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_timeout=STORE_TIMEOUT_SECONDS,
        connect_args={"connect_timeout": max(1, int(STORE_TIMEOUT_SECONDS))},
    )


engine = build_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
