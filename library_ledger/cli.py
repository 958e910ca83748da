import click
from flask.cli import with_appcontext

from library_ledger.extensions import db
from library_ledger.models.book import Book
from library_ledger.models.borrower import Borrower

SAMPLE_BOOKS = [
    ("The Great Gatsby", "F. Scott Fitzgerald", "9780743273565", 1925, 5),
    ("To Kill a Mockingbird", "Harper Lee", "9780061120084", 1960, 3),
    ("1984", "George Orwell", "9780451524935", 1949, 4),
    ("Pride and Prejudice", "Jane Austen", "9780486284736", 1813, 2),
    ("The Hobbit", "J.R.R. Tolkien", "9780547928227", 1937, 6),
]

SAMPLE_BORROWERS = [
    ("John Smith", "john.smith@example.com", "555-0101"),
    ("Emily Johnson", "emily.johnson@example.com", "555-0102"),
    ("Michael Williams", "michael.williams@example.com", "555-0103"),
    ("Sarah Brown", "sarah.brown@example.com", "555-0104"),
    ("David Jones", "david.jones@example.com", "555-0105"),
]


def seed_sample_data():
    """Insert sample books and borrowers into empty tables. Returns (books, borrowers) added."""
    added_books = added_borrowers = 0

    if db.session.query(Book.id).first() is None:
        for title, author, isbn, year, copies in SAMPLE_BOOKS:
            db.session.add(Book(
                title=title,
                author=author,
                isbn=isbn,
                published_year=year,
                total_copies=copies,
                available_copies=copies,
            ))
            added_books += 1

    if db.session.query(Borrower.id).first() is None:
        for name, email, phone in SAMPLE_BORROWERS:
            db.session.add(Borrower(name=name, email=email, phone=phone))
            added_borrowers += 1

    db.session.commit()
    return added_books, added_borrowers


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create all tables."""
    db.create_all()
    click.echo("Tables created.")


@click.command("seed-db")
@with_appcontext
def seed_db_command():
    """Seed sample books and borrowers (only into empty tables)."""
    books, borrowers = seed_sample_data()
    click.echo(f"Seeded {books} books and {borrowers} borrowers.")
