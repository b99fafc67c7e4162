import os
from dotenv import load_dotenv
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from models import Base

load_dotenv()

ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
DEBUG = ENVIRONMENT == "dev"

HTTP_PORT = int(os.getenv("HTTP_PORT", "8000"))

DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_NAME = os.getenv("DB_NAME")
DATABASE_URL = os.getenv("DATABASE_URL")

JWT_SECRET_KEY = os.getenv("JWT_SECRET")
JWT_ALGORITHM = "HS256"
JWT_ACCESS_TOKEN_EXPIRE_MINUTES = 60

VERIFICATION_CODE_EXPIRE_MINUTES = 10

TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
TWILIO_PHONE_NUMBER = os.getenv("TWILIO_PHONE_NUMBER")

FLUTTERWAVE_SECRET_KEY = os.getenv("FLUTTERWAVE_SECRET_KEY")
FLUTTERWAVE_BASE_URL = os.getenv("FLUTTERWAVE_BASE_URL", "https://api.flutterwave.com")
OUTBOUND_HTTP_TIMEOUT = 30

DEFAULT_COUNTRY_CODE = os.getenv("DEFAULT_COUNTRY_CODE", "NG")
DEFAULT_DIAL_CODE = os.getenv("DEFAULT_DIAL_CODE", "234")


def build_database_url():
    if DATABASE_URL:
        return DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")
    if DB_USER and DB_PASSWORD and DB_NAME:
        return f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    return None


def validate_settings():
    """Fail fast when required configuration is missing"""
    missing = []
    if build_database_url() is None:
        missing.append("DATABASE_URL (or DB_USER, DB_PASSWORD, DB_NAME)")
    if not JWT_SECRET_KEY:
        missing.append("JWT_SECRET")
    for name in ("TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TWILIO_PHONE_NUMBER"):
        if not globals()[name]:
            missing.append(name)

    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")


_database_url = build_database_url()

if _database_url:
    if _database_url.startswith("sqlite"):
        async_engine = create_async_engine(
            _database_url,
            echo=False,
            poolclass=NullPool,
            connect_args={"check_same_thread": False},
        )

        @event.listens_for(async_engine.sync_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    else:
        async_engine = create_async_engine(
            _database_url,
            echo=False,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=0
        )

    AsyncSessionLocal = sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )
else:
    async_engine = None
    AsyncSessionLocal = None

async def get_db():
    if AsyncSessionLocal is None:
        raise Exception("Database not configured")
    async with AsyncSessionLocal() as session:
        yield session

async def init_db():
    if async_engine is None:
        raise Exception("Database not configured")
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
