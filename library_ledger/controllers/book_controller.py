from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from library_ledger.services.book_service import BookService
from library_ledger.repositories.loan_registry import LoanRegistry
from library_ledger.utils.auth import role_required
from library_ledger.utils.responses import json_body, json_failure

book_bp = Blueprint("books", __name__)


def _book_dict(b, with_loans=False):
    data = {
        "id": b.id,
        "title": b.title,
        "author": b.author,
        "isbn": b.isbn,
        "published_year": b.published_year,
        "total_copies": b.total_copies,
        "available_copies": b.available_copies,
    }
    if with_loans:
        data["open_loans"] = LoanRegistry.count_open_for_book(b.id)
    return data


@book_bp.get("/")
def list_books():
    books = BookService.list_books().value
    return jsonify({"success": True, "data": [_book_dict(b) for b in books]})


@book_bp.get("/<id:book_id>")
def get_book(book_id: int):
    result = BookService.get_book(book_id)
    if not result.ok:
        return json_failure(result.error)
    return jsonify({"success": True, "data": _book_dict(result.value, with_loans=True)})


@book_bp.post("/")
@jwt_required()
@role_required("admin")
def create_book():
    data = json_body()
    result = BookService.create_book(data)
    if not result.ok:
        return json_failure(result.error)
    return jsonify({"success": True, "id": result.value.id}), 201


@book_bp.put("/<id:book_id>")
@jwt_required()
@role_required("admin")
def update_book(book_id: int):
    data = json_body()
    result = BookService.update_book(book_id, data)
    if not result.ok:
        return json_failure(result.error)
    return jsonify({"success": True, "data": _book_dict(result.value)})


@book_bp.delete("/<id:book_id>")
@jwt_required()
@role_required("admin")
def delete_book(book_id: int):
    result = BookService.delete_book(book_id)
    if not result.ok:
        return json_failure(result.error)
    return jsonify({"success": True})
