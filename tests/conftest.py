from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from database import Base
from Catalog_module.bootstrap import seed_sample_data
from Catalog_module.Catalog_crud import create_author, create_publisher, create_category, create_book
from Catalog_module.Catalog_schema import AuthorCreate, PublisherCreate, CategoryCreate, BookCreate
from Member_module.Member_crud import create_member
from Member_module.Member_schema import MemberCreate


@pytest.fixture
def engine():
    # One in-memory database per test, shared by every session through StaticPool
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def seeded_db(db):
    seed_sample_data(db)
    return db


@pytest.fixture
def member(db):
    return create_member(db, MemberCreate(
        national_id="ID-1001",
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        membership_date=date(2024, 1, 10),
    ))


@pytest.fixture
def book(db):
    """A book with two credited authors and no copies."""
    publisher = create_publisher(db, PublisherCreate(publisher_name="Test Press", established_year=1990))
    category = create_category(db, CategoryCreate(category_name="Testing"))
    first = create_author(db, AuthorCreate(first_name="Kent", last_name="Beck"))
    second = create_author(db, AuthorCreate(first_name="Erich", last_name="Gamma"))
    return create_book(db, BookCreate(
        isbn="978-0000000001",
        title="Patterns of Testing",
        publisher_id=publisher.publisher_id,
        category_id=category.category_id,
        author_ids=[first.author_id, second.author_id],
    ))

