from flask import current_app
from sqlalchemy import select, update

from library_ledger.extensions import db
from library_ledger.models.book import Book
from library_ledger.utils.result import ErrorKind, Result


class InventoryLedger:
    """
    Sole writer of ``books.total_copies`` / ``books.available_copies``.

    Every mutation is a single conditional UPDATE whose WHERE clause carries
    the invariant, so two requests racing for the last copy are serialized
    by the store itself: one statement matches a row, the other matches
    none. Callers run these inside their own UnitOfWork; nothing here
    commits.
    """

    @staticmethod
    def _counters(book_id: int):
        return db.session.execute(
            select(Book.total_copies, Book.available_copies).where(Book.id == book_id)
        ).first()

    @staticmethod
    def try_reserve(book_id: int) -> Result:
        res = db.session.execute(
            update(Book)
            .where(Book.id == book_id, Book.available_copies > 0)
            .values(available_copies=Book.available_copies - 1)
            .execution_options(synchronize_session=False)
        )
        row = InventoryLedger._counters(book_id)
        if res.rowcount == 0:
            if row is None:
                return Result.fail(ErrorKind.NOT_FOUND, f"Book {book_id} not found")
            return Result.fail(ErrorKind.OUT_OF_STOCK, "No available copies of this book")
        return Result.success(row.available_copies)

    @staticmethod
    def release(book_id: int) -> Result:
        res = db.session.execute(
            update(Book)
            .where(Book.id == book_id, Book.available_copies < Book.total_copies)
            .values(available_copies=Book.available_copies + 1)
            .execution_options(synchronize_session=False)
        )
        row = InventoryLedger._counters(book_id)
        if row is None:
            return Result.fail(ErrorKind.NOT_FOUND, f"Book {book_id} not found")
        if res.rowcount == 0:
            # every copy is already on the shelf; a release here means the
            # loan table and the counters disagree
            current_app.logger.error(
                f"[inventory] consistency violation: release of book={book_id} "
                f"would exceed total (available={row.available_copies} total={row.total_copies})"
            )
            return Result.fail(
                ErrorKind.CONSISTENCY_VIOLATION,
                f"Releasing a copy of book {book_id} would exceed its total copies",
            )
        return Result.success(row.available_copies)

    @staticmethod
    def adjust_total(book_id: int, new_total: int) -> Result:
        """
        Set ``total_copies`` and shift ``available_copies`` by the same delta.

        Refused when more copies are on loan than ``new_total`` allows.
        Returns ``(total, available)`` after the change.
        """
        if new_total < 0:
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "total_copies must not be negative")

        delta = new_total - Book.total_copies
        res = db.session.execute(
            update(Book)
            .where(Book.id == book_id, Book.available_copies + delta >= 0)
            .values(total_copies=new_total, available_copies=Book.available_copies + delta)
            .execution_options(synchronize_session=False)
        )
        row = InventoryLedger._counters(book_id)
        if row is None:
            return Result.fail(ErrorKind.NOT_FOUND, f"Book {book_id} not found")
        if res.rowcount == 0:
            on_loan = row.total_copies - row.available_copies
            return Result.fail(
                ErrorKind.INVALID_ARGUMENT,
                f"{on_loan} copies are on loan; total_copies cannot drop to {new_total}",
            )
        return Result.success((row.total_copies, row.available_copies))
