from sqlalchemy import CheckConstraint, Column, Integer, String, Text
from app.core.database import Base


class Company(Base):
    """
    Company that posts jobs. Read-only from the jobs data layer; its public
    fields are inlined into a job's detail view.
    """
    __tablename__ = "companies"

    handle = Column(String(25), primary_key=True)
    name = Column(Text, nullable=False, unique=True)
    num_employees = Column(Integer, nullable=True)
    description = Column(Text, nullable=False)
    logo_url = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("num_employees >= 0", name="ck_companies_num_employees"),
    )

    def __repr__(self):
        return f"<Company(handle='{self.handle}', name='{self.name}')>"
