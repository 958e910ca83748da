from flask import current_app

from library_ledger.models.borrower import Borrower
from library_ledger.repositories.borrower_repo import BorrowerRepo
from library_ledger.repositories.loan_registry import LoanRegistry
from library_ledger.repositories.unit_of_work import UnitOfWork, storage_guarded
from library_ledger.utils.result import ErrorKind, Result
from library_ledger.utils.validation import text_field


class BorrowerService:
    @staticmethod
    @storage_guarded("borrowers")
    def list_borrowers():
        return Result.success(BorrowerRepo.list_all())

    @staticmethod
    @storage_guarded("borrowers")
    def get_borrower(borrower_id: int):
        borrower = BorrowerRepo.get(borrower_id)
        if not borrower:
            return Result.fail(ErrorKind.NOT_FOUND, f"Borrower {borrower_id} not found")
        return Result.success(borrower)

    @staticmethod
    @storage_guarded("borrowers")
    def create_borrower(data: dict):
        try:
            name = text_field(data, "name")
            email = text_field(data, "email")
            phone = text_field(data, "phone")
        except ValueError as e:
            return Result.fail(ErrorKind.INVALID_ARGUMENT, str(e))
        if not name or not email:
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "name and email are required")

        with UnitOfWork() as uow:
            if BorrowerRepo.get_by_email(email):
                uow.rollback_only()
                return Result.fail(ErrorKind.INVALID_ARGUMENT, f"Borrower with email {email} already exists")
            borrower = BorrowerRepo.add(Borrower(name=name, email=email, phone=phone))

        current_app.logger.info(f"[borrowers] created borrower={borrower.id}")
        return Result.success(borrower)

    @staticmethod
    @storage_guarded("borrowers")
    def update_borrower(borrower_id: int, data: dict):
        try:
            name = text_field(data, "name")
            email = text_field(data, "email")
            phone = text_field(data, "phone")
        except ValueError as e:
            return Result.fail(ErrorKind.INVALID_ARGUMENT, str(e))

        with UnitOfWork() as uow:
            borrower = BorrowerRepo.get(borrower_id)
            if not borrower:
                uow.rollback_only()
                return Result.fail(ErrorKind.NOT_FOUND, f"Borrower {borrower_id} not found")

            if email:
                other = BorrowerRepo.get_by_email(email)
                if other is not None and other.id != borrower.id:
                    uow.rollback_only()
                    return Result.fail(ErrorKind.INVALID_ARGUMENT, f"Borrower with email {email} already exists")
                borrower.email = email
            if name:
                borrower.name = name
            if "phone" in data:
                borrower.phone = phone

        return Result.success(borrower)

    @staticmethod
    @storage_guarded("borrowers")
    def delete_borrower(borrower_id: int):
        with UnitOfWork() as uow:
            borrower = BorrowerRepo.get(borrower_id)
            if not borrower:
                uow.rollback_only()
                return Result.fail(ErrorKind.NOT_FOUND, f"Borrower {borrower_id} not found")
            if LoanRegistry.count_open_for_borrower(borrower_id):
                uow.rollback_only()
                return Result.fail(ErrorKind.INVALID_ARGUMENT, "Cannot delete borrower with active loans")
            if LoanRegistry.has_history_for_borrower(borrower_id):
                uow.rollback_only()
                return Result.fail(ErrorKind.INVALID_ARGUMENT, "Cannot delete borrower with loan history")
            BorrowerRepo.delete(borrower)

        current_app.logger.info(f"[borrowers] deleted borrower={borrower_id}")
        return Result.success(None)
