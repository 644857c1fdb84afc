"""Shared fixtures: an in-memory SQLite database and sample models."""

from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy import JSON, DateTime, ForeignKey, Integer, Text, func
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.pool import StaticPool

from orm_repository.infrastructure.persistence.repositories import (
    SqlMultiTenantRepository,
    SqlRepository,
)
from orm_repository.infrastructure.tenancy import TenantContext


class IntegrationBase(DeclarativeBase):
    pass


class Author(IntegrationBase):
    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    full_name: Mapped[str] = mapped_column(Text)
    email_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[str | None] = mapped_column(Text, nullable=True)
    preferences: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    tenant_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, onupdate=func.now()
    )

    posts: Mapped[list["Post"]] = relationship(
        back_populates="author", cascade="all, delete-orphan"
    )


class Post(IntegrationBase):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("authors.id"))
    title: Mapped[str] = mapped_column(Text)
    tenant_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    author: Mapped[Author] = relationship(back_populates="posts")


class AuthorRepository(SqlRepository):
    model = Author
    matching = {"email": "email_address"}
    guarded = ("id",)


class PostRepository(SqlRepository):
    model = Post


class TenantAuthorRepository(SqlMultiTenantRepository):
    model = Author
    matching = {"email": "email_address"}


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(IntegrationBase.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def other_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def authors(session):
    return AuthorRepository(session)


@pytest.fixture
def posts(session):
    return PostRepository(session)


@pytest.fixture
def tenant_authors(session):
    return TenantAuthorRepository(session, TenantContext())
