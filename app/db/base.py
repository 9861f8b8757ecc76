"""이 파일은 .py DB 베이스 모듈로 선언형 모델의 기반 클래스를 제공합니다."""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
