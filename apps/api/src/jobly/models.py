from sqlalchemy import ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobly.db import Base

# INTEGER column range and equity NUMERIC scale
INTEGER_MAX = 2**31 - 1
EQUITY_SCALE = 3


class CompanyRecord(Base):
    __tablename__ = "companies"

    handle: Mapped[str] = mapped_column(String(25), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    jobs: Mapped[list["JobRecord"]] = relationship(
        back_populates="company",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class JobRecord(Base):
    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    salary: Mapped[int | None] = mapped_column(Integer, nullable=True)
    equity: Mapped[float | None] = mapped_column(
        Numeric(precision=4, scale=EQUITY_SCALE, asdecimal=False),
        nullable=True,
    )
    company_handle: Mapped[str] = mapped_column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
    )

    company: Mapped[CompanyRecord] = relationship(back_populates="jobs")
