"""Shared pytest fixtures and test utilities for modelscheme tests."""

import datetime
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from modelscheme.options import reset_default_options
from modelscheme.schemes import SchemeRegistry
from tests.models import Author, Base, Post, Section


@pytest.fixture(autouse=True)
def fresh_defaults() -> Generator[None, None, None]:
    """Make every test start from default options built from a clean environment."""
    reset_default_options()
    yield
    reset_default_options()


@pytest.fixture
def registry() -> SchemeRegistry:
    """Provide an empty scheme registry."""
    return SchemeRegistry()


@pytest.fixture(scope="function")
def engine() -> Generator[Engine, None, None]:
    """
    Create an in-memory SQLite database for testing.

    Yields:
        Engine with tables created
    """
    engine = create_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Get a database session bound to the test engine."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def author() -> Author:
    """Create an unsaved author."""
    return Author(
        id=2,
        name="Ann",
        email="ann@example.com",
        birthday=datetime.date(1990, 5, 17),
        avatar=bytes([0, 1, 2]),
        profile={"tags": ["fiction"], "rank": 3},
    )


@pytest.fixture
def post(author) -> Post:
    """Create an unsaved post written by the author fixture."""
    return Post(id=1, author_id=9, title="T", body="B", author=author)


@pytest.fixture
def section_tree() -> Section:
    """
    Create an unsaved section hierarchy.

    Structure:
        1 Introduction
            2 Background
                4 History
            3 Goals
    """
    root = Section(id=1, heading="Introduction", order_index=0)
    background = Section(id=2, heading="Background", order_index=0, parent_section=root)
    Section(id=3, heading="Goals", order_index=1, parent_section=root)
    Section(id=4, heading="History", order_index=0, parent_section=background)
    return root


class TestDataGenerator:
    """Utility class for generating test data."""

    @staticmethod
    def create_authors(count: int) -> list[Author]:
        return [Author(id=i, name=f"Author {i}", email=f"author{i}@example.com") for i in range(1, count + 1)]

    @staticmethod
    def create_posts(authors: list[Author], per_author: int = 2) -> list[Post]:
        """Create posts round-robin over the given authors."""
        posts = []
        post_id = 1
        for author in authors:
            for i in range(per_author):
                posts.append(
                    Post(
                        id=post_id,
                        author_id=author.id,
                        title=f"Post {post_id}",
                        body=f"Content for post {post_id} by {author.name}",
                        author=author,
                    )
                )
                post_id += 1
        return posts


@pytest.fixture
def test_data_generator():
    """Provide TestDataGenerator."""
    return TestDataGenerator
