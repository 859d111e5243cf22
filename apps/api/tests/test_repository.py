import pytest
from sqlalchemy.orm import Session

from jobly.errors import JobNotFoundError, UnknownCompanyError
from jobly.models import JobRecord
from jobly.query_builder import build_job_query
from jobly.repository import SqlJobRepository


@pytest.fixture
def repository(engine, seeded_jobs):
    with Session(engine) as session:
        yield SqlJobRepository(session)


def _titles(jobs) -> list[str]:
    return [job.title for job in jobs]


def test_list_without_filters_is_ordered_by_title(repository: SqlJobRepository) -> None:
    repository.create_job({"title": "auditor", "salary": None, "equity": None, "company_handle": "c2"})

    jobs = repository.list_jobs(build_job_query({}))

    assert _titles(jobs) == ["accountant", "auditor", "clerk"]


def test_list_repeated_with_same_filters_is_stable(repository: SqlJobRepository) -> None:
    repository.create_job({"title": "clerk", "salary": 45000, "equity": 0.1, "company_handle": "c1"})
    spec = build_job_query({"title": "CLERK"})

    first = [job.id for job in repository.list_jobs(spec)]
    second = [job.id for job in repository.list_jobs(spec)]

    assert first == second
    assert first == sorted(first)
    assert len(first) == 2


def test_title_filter_is_case_insensitive(repository: SqlJobRepository) -> None:
    assert _titles(repository.list_jobs(build_job_query({"title": "cOuNt"}))) == ["accountant"]


def test_title_filter_treats_wildcards_literally(repository: SqlJobRepository) -> None:
    repository.create_job({"title": "100% remote", "salary": 1, "equity": None, "company_handle": "c1"})

    assert _titles(repository.list_jobs(build_job_query({"title": "%"}))) == ["100% remote"]
    assert _titles(repository.list_jobs(build_job_query({"title": "_"}))) == []


def test_title_filter_folds_non_ascii_case(repository: SqlJobRepository) -> None:
    repository.create_job({"title": "ÉCOLE teacher", "salary": None, "equity": None, "company_handle": "c1"})

    assert _titles(repository.list_jobs(build_job_query({"title": "école"}))) == ["ÉCOLE teacher"]
    assert _titles(repository.list_jobs(build_job_query({"title": "ÉCOLE"}))) == ["ÉCOLE teacher"]


def test_min_salary_is_inclusive(repository: SqlJobRepository) -> None:
    jobs = repository.list_jobs(build_job_query({"minSalary": 40000}))

    assert _titles(jobs) == ["accountant", "clerk"]
    assert _titles(repository.list_jobs(build_job_query({"minSalary": 40001}))) == ["accountant"]


def test_min_salary_excludes_null_salaries(repository: SqlJobRepository) -> None:
    repository.create_job({"title": "intern", "salary": None, "equity": None, "company_handle": "c1"})

    assert "intern" not in _titles(repository.list_jobs(build_job_query({"minSalary": 0})))


def test_has_equity_excludes_zero_and_null(repository: SqlJobRepository) -> None:
    repository.create_job({"title": "intern", "salary": None, "equity": None, "company_handle": "c1"})

    assert _titles(repository.list_jobs(build_job_query({"hasEquity": True}))) == ["accountant"]
    assert _titles(repository.list_jobs(build_job_query({"hasEquity": False}))) == [
        "accountant",
        "clerk",
        "intern",
    ]


def test_combined_filters(repository: SqlJobRepository) -> None:
    spec = build_job_query({"title": "ler", "minSalary": 10000, "hasEquity": False})

    assert _titles(repository.list_jobs(spec)) == ["clerk"]


def test_create_rejects_unknown_company(repository: SqlJobRepository) -> None:
    with pytest.raises(UnknownCompanyError):
        repository.create_job({"title": "new", "company_handle": "cNone"})


def test_update_changes_only_mutable_fields(
    repository: SqlJobRepository, seeded_jobs: dict[str, int]
) -> None:
    job_id = seeded_jobs["accountant"]

    job = repository.update_job(job_id, {"salary": 5, "company_handle": "c2"})

    assert job.salary == 5
    assert job.company_handle == "c1"
    assert job.equity == pytest.approx(0.2)


def test_get_update_delete_missing_job(repository: SqlJobRepository) -> None:
    with pytest.raises(JobNotFoundError):
        repository.get_job(9999)
    with pytest.raises(JobNotFoundError):
        repository.update_job(9999, {"salary": 1})
    with pytest.raises(JobNotFoundError):
        repository.delete_job(9999)


def test_delete_removes_row(repository: SqlJobRepository, seeded_jobs: dict[str, int], engine) -> None:
    repository.delete_job(seeded_jobs["clerk"])

    with Session(engine) as session:
        assert session.get(JobRecord, seeded_jobs["clerk"]) is None
