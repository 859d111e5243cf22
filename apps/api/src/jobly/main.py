import logging
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Path, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.datastructures import QueryParams

from jobly import __version__
from jobly.auth import CurrentUser, require_admin
from jobly.config import get_settings
from jobly.db import get_engine, get_session
from jobly.errors import InvalidFilterError, JobNotFoundError, UnknownCompanyError
from jobly.logging_setup import setup_logging
from jobly.models import INTEGER_MAX, JobRecord
from jobly.query_builder import build_job_query
from jobly.repository import JobRepository, SqlJobRepository
from jobly.schemas import JobCreate, JobFilterParams, JobOut, JobUpdate

logger = logging.getLogger(__name__)

app = FastAPI(title="Jobly API", version=__version__)


@app.on_event("startup")
def startup() -> None:
    setup_logging(get_settings().log_level)
    get_engine()


def get_job_repository(session: Annotated[Session, Depends(get_session)]) -> JobRepository:
    return SqlJobRepository(session)


def _job_payload(job: JobRecord) -> dict[str, Any]:
    return JobOut.model_validate(job).model_dump(by_alias=True)


def _single_valued(query_params: QueryParams) -> dict[str, str]:
    values: dict[str, str] = {}
    for key, value in query_params.multi_items():
        if key in values:
            raise InvalidFilterError(key, "given more than once")
        values[key] = value
    return values


@app.exception_handler(RequestValidationError)
def request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(ValidationError)
def schema_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors(include_url=False))},
    )


@app.exception_handler(InvalidFilterError)
def invalid_filter_error(request: Request, exc: InvalidFilterError) -> JSONResponse:
    logger.info("rejected job filter %s: %s", exc.key, exc.reason)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(UnknownCompanyError)
def unknown_company_error(request: Request, exc: UnknownCompanyError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(JobNotFoundError)
def job_not_found_error(request: Request, exc: JobNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(SQLAlchemyError)
def store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "internal server error"})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/jobs", status_code=201)
def create_job(
    request: JobCreate,
    repository: Annotated[JobRepository, Depends(get_job_repository)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> dict[str, Any]:
    job = repository.create_job(request.model_dump())
    return {"job": _job_payload(job)}


@app.get("/jobs")
def list_jobs(
    request: Request,
    repository: Annotated[JobRepository, Depends(get_job_repository)],
) -> dict[str, Any]:
    params = JobFilterParams.model_validate(_single_valued(request.query_params))
    spec = build_job_query(params.to_filters())
    jobs = repository.list_jobs(spec)
    return {"jobs": [_job_payload(job) for job in jobs]}


@app.get("/jobs/{job_id}")
def get_job(
    job_id: Annotated[int, Path(ge=1, le=INTEGER_MAX)],
    repository: Annotated[JobRepository, Depends(get_job_repository)],
) -> dict[str, Any]:
    return {"job": _job_payload(repository.get_job(job_id))}


@app.patch("/jobs/{job_id}")
def update_job(
    job_id: Annotated[int, Path(ge=1, le=INTEGER_MAX)],
    request: JobUpdate,
    repository: Annotated[JobRepository, Depends(get_job_repository)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> dict[str, Any]:
    job = repository.update_job(job_id, request.model_dump(exclude_unset=True))
    return {"job": _job_payload(job)}


@app.delete("/jobs/{job_id}")
def delete_job(
    job_id: Annotated[int, Path(ge=1, le=INTEGER_MAX)],
    repository: Annotated[JobRepository, Depends(get_job_repository)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> dict[str, int]:
    repository.delete_job(job_id)
    return {"deleted": job_id}


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run("jobly.main:app", host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    run()
