from sqlalchemy import select

from library_ledger.models.borrower import Borrower
from library_ledger.extensions import db


class BorrowerRepo:
    @staticmethod
    def list_all():
        return db.session.scalars(select(Borrower).order_by(Borrower.name)).all()

    @staticmethod
    def get(borrower_id: int):
        return db.session.get(Borrower, borrower_id)

    @staticmethod
    def exists(borrower_id: int) -> bool:
        return db.session.scalar(select(Borrower.id).where(Borrower.id == borrower_id)) is not None

    @staticmethod
    def get_by_email(email: str):
        return db.session.scalar(select(Borrower).where(Borrower.email == email))

    @staticmethod
    def add(borrower: Borrower):
        db.session.add(borrower)
        db.session.flush()
        return borrower

    @staticmethod
    def delete(borrower: Borrower):
        db.session.delete(borrower)
