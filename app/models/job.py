from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String, Text
from app.core.database import Base


class Job(Base):
    """
    Job listing owned by a company.

    The CRUD layer talks to this table with hand-written SQL; the model is the
    schema declaration (create_all in tests, AUTO_CREATE_TABLES in dev).
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False, index=True)
    salary = Column(Integer, nullable=True)
    # Fraction of the company, 0..1; returned to clients as a string
    equity = Column(Numeric, nullable=True)
    company_handle = Column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("salary >= 0", name="ck_jobs_salary"),
        CheckConstraint("equity <= 1.0", name="ck_jobs_equity"),
    )

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', company_handle='{self.company_handle}')>"
