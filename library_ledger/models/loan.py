from library_ledger.extensions import db


class Loan(db.Model):
    __tablename__ = "loans"

    id = db.Column(db.Integer, primary_key=True)

    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)
    borrower_id = db.Column(db.Integer, db.ForeignKey("borrowers.id"), nullable=False, index=True)

    loan_date = db.Column(db.DateTime, nullable=False)
    due_date = db.Column(db.DateTime, nullable=False)
    # NULL while the loan is open; written once on return
    return_date = db.Column(db.DateTime, nullable=True)

    @property
    def is_open(self) -> bool:
        return self.return_date is None
