from sqlalchemy import select

from library_ledger.models.book import Book
from library_ledger.extensions import db


class BookRepo:
    @staticmethod
    def list_all():
        return db.session.scalars(select(Book).order_by(Book.id.desc())).all()

    @staticmethod
    def get(book_id: int):
        return db.session.get(Book, book_id)

    @staticmethod
    def exists(book_id: int) -> bool:
        return db.session.scalar(select(Book.id).where(Book.id == book_id)) is not None

    @staticmethod
    def get_by_isbn(isbn: str):
        return db.session.scalar(select(Book).where(Book.isbn == isbn))

    @staticmethod
    def add(book: Book):
        db.session.add(book)
        db.session.flush()
        return book

    @staticmethod
    def delete(book: Book):
        db.session.delete(book)
