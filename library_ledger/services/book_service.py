from flask import current_app

from library_ledger.models.book import Book
from library_ledger.repositories.book_repo import BookRepo
from library_ledger.repositories.inventory_ledger import InventoryLedger
from library_ledger.repositories.loan_registry import LoanRegistry
from library_ledger.repositories.unit_of_work import UnitOfWork, storage_guarded
from library_ledger.utils.result import ErrorKind, Result
from library_ledger.utils.validation import int_field, text_field


class BookService:
    @staticmethod
    @storage_guarded("books")
    def list_books():
        return Result.success(BookRepo.list_all())

    @staticmethod
    @storage_guarded("books")
    def get_book(book_id: int):
        book = BookRepo.get(book_id)
        if not book:
            return Result.fail(ErrorKind.NOT_FOUND, f"Book {book_id} not found")
        return Result.success(book)

    @staticmethod
    @storage_guarded("books")
    def create_book(data: dict):
        try:
            title = text_field(data, "title")
            author = text_field(data, "author")
            isbn = text_field(data, "isbn")
            total = int_field(data, "total_copies", 1)
            year = int_field(data, "published_year")
        except ValueError as e:
            return Result.fail(ErrorKind.INVALID_ARGUMENT, str(e))
        if not title or not author:
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "title and author are required")
        if total is None:
            total = 1
        if total < 0:
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "total_copies must not be negative")

        with UnitOfWork() as uow:
            if isbn and BookRepo.get_by_isbn(isbn):
                uow.rollback_only()
                return Result.fail(ErrorKind.INVALID_ARGUMENT, f"A book with ISBN {isbn} already exists")

            # a new title starts with every copy on the shelf
            book = BookRepo.add(Book(
                title=title,
                author=author,
                isbn=isbn,
                published_year=year,
                total_copies=total,
                available_copies=total,
            ))

        current_app.logger.info(f"[books] created book={book.id} copies={total}")
        return Result.success(book)

    @staticmethod
    @storage_guarded("books")
    def update_book(book_id: int, data: dict):
        if "available_copies" in data:
            return Result.fail(
                ErrorKind.INVALID_ARGUMENT,
                "available_copies is maintained by issue/return; change total_copies instead",
            )
        try:
            title = text_field(data, "title")
            author = text_field(data, "author")
            isbn = text_field(data, "isbn")
            new_total = int_field(data, "total_copies")
            year = int_field(data, "published_year")
        except ValueError as e:
            return Result.fail(ErrorKind.INVALID_ARGUMENT, str(e))

        with UnitOfWork() as uow:
            book = BookRepo.get(book_id)
            if not book:
                uow.rollback_only()
                return Result.fail(ErrorKind.NOT_FOUND, f"Book {book_id} not found")

            if title:
                book.title = title
            if author:
                book.author = author
            if "isbn" in data:
                other = BookRepo.get_by_isbn(isbn) if isbn else None
                if other is not None and other.id != book.id:
                    uow.rollback_only()
                    return Result.fail(ErrorKind.INVALID_ARGUMENT, f"A book with ISBN {isbn} already exists")
                book.isbn = isbn
            if year is not None:
                book.published_year = year

            if new_total is not None:
                adjusted = InventoryLedger.adjust_total(book_id, new_total)
                if not adjusted.ok:
                    uow.rollback_only()
                    return adjusted
                current_app.logger.info(
                    f"[books] book={book_id} inventory adjusted total={adjusted.value[0]} available={adjusted.value[1]}"
                )

        return Result.success(book)

    @staticmethod
    @storage_guarded("books")
    def delete_book(book_id: int):
        with UnitOfWork() as uow:
            book = BookRepo.get(book_id)
            if not book:
                uow.rollback_only()
                return Result.fail(ErrorKind.NOT_FOUND, f"Book {book_id} not found")
            if LoanRegistry.count_open_for_book(book_id):
                uow.rollback_only()
                return Result.fail(ErrorKind.INVALID_ARGUMENT, "Cannot delete a book with active loans")
            if LoanRegistry.has_history_for_book(book_id):
                uow.rollback_only()
                return Result.fail(ErrorKind.INVALID_ARGUMENT, "Cannot delete a book with loan history")
            BookRepo.delete(book)

        current_app.logger.info(f"[books] deleted book={book_id}")
        return Result.success(None)
