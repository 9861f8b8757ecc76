"""이 파일은 .py 테스트 보조 모듈로 독립된 메모리 DB 세션 팩토리를 만듭니다."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.seed import seed_defaults


def make_session_factory(seed: bool = True):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    if seed:
        seed_defaults(factory)
    return factory
