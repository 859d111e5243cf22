from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from sqlalchemy import select, text
from sqlalchemy.orm import Session

from jobly.errors import JobNotFoundError, UnknownCompanyError
from jobly.models import CompanyRecord, JobRecord
from jobly.query_builder import QuerySpec

logger = logging.getLogger(__name__)

_MUTABLE_FIELDS = ("title", "salary", "equity")


class JobRepository(Protocol):
    def list_jobs(self, spec: QuerySpec) -> Sequence[JobRecord]:
        ...

    def get_job(self, job_id: int) -> JobRecord:
        ...

    def create_job(self, data: Mapping[str, Any]) -> JobRecord:
        ...

    def update_job(self, job_id: int, data: Mapping[str, Any]) -> JobRecord:
        ...

    def delete_job(self, job_id: int) -> None:
        ...


class SqlJobRepository:
    """Job store backed by a SQLAlchemy session.

    Writes commit immediately; the session is owned by the caller.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_jobs(self, spec: QuerySpec) -> Sequence[JobRecord]:
        stmt = select(JobRecord)
        for predicate in spec.predicates:
            stmt = stmt.where(text(predicate.fragment))
        stmt = stmt.order_by(*(text(clause) for clause in spec.order_by))
        return self._session.scalars(stmt, spec.params).all()

    def get_job(self, job_id: int) -> JobRecord:
        job = self._session.get(JobRecord, job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def create_job(self, data: Mapping[str, Any]) -> JobRecord:
        handle = data["company_handle"]
        if self._session.get(CompanyRecord, handle) is None:
            raise UnknownCompanyError(handle)

        job = JobRecord(
            title=data["title"],
            salary=data.get("salary"),
            equity=data.get("equity"),
            company_handle=handle,
        )
        self._session.add(job)
        self._session.commit()
        self._session.refresh(job)
        logger.info("created job id=%s company=%s", job.id, handle)
        return job

    def update_job(self, job_id: int, data: Mapping[str, Any]) -> JobRecord:
        job = self.get_job(job_id)
        for field in _MUTABLE_FIELDS:
            if field in data:
                setattr(job, field, data[field])
        self._session.commit()
        self._session.refresh(job)
        logger.info("updated job id=%s fields=%s", job_id, sorted(data))
        return job

    def delete_job(self, job_id: int) -> None:
        job = self.get_job(job_id)
        self._session.delete(job)
        self._session.commit()
        logger.info("deleted job id=%s", job_id)
