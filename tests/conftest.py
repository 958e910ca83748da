import pytest
from flask_jwt_extended import create_access_token

from library_ledger import create_app
from library_ledger.config import Config
from library_ledger.extensions import db
from library_ledger.models.book import Book
from library_ledger.models.borrower import Borrower


@pytest.fixture
def app(tmp_path):
    # a file database so that threads get their own connections
    class TestConfig(Config):
        TESTING = True
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'ledger_test.db'}"
        JWT_SECRET_KEY = "test-jwt-secret-that-is-long-enough-for-hs256"
        LOG_LEVEL = "DEBUG"

    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_book(app):
    counter = {"n": 0}

    def _make(total=1, available=None, title=None):
        counter["n"] += 1
        with app.app_context():
            book = Book(
                title=title or f"Book {counter['n']}",
                author="Test Author",
                isbn=f"978000000{counter['n']:04d}",
                total_copies=total,
                available_copies=total if available is None else available,
            )
            db.session.add(book)
            db.session.commit()
            return book.id

    return _make


@pytest.fixture
def make_borrower(app):
    counter = {"n": 0}

    def _make(name=None):
        counter["n"] += 1
        with app.app_context():
            borrower = Borrower(
                name=name or f"Borrower {counter['n']}",
                email=f"borrower{counter['n']}@example.com",
                phone="555-0100",
            )
            db.session.add(borrower)
            db.session.commit()
            return borrower.id

    return _make


@pytest.fixture
def counters(app):
    """Read (total, available) for a book straight from the database."""
    def _read(book_id):
        with app.app_context():
            book = db.session.get(Book, book_id)
            return book.total_copies, book.available_copies

    return _read


@pytest.fixture
def auth_headers(app):
    def _make(role="librarian"):
        with app.app_context():
            token = create_access_token(identity="1", additional_claims={"role": role})
        return {"Authorization": f"Bearer {token}"}

    return _make
