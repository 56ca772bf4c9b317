import logging
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.crud import job as job_crud
from app.schemas.job import JobCreateRequest, JobDetailResponse, JobResponse, JobUpdateRequest

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=JobResponse)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Create a new job posting.

    Body: { title, salary, equity, companyHandle }
    """
    return job_crud.create(db, request.model_dump(by_alias=True))


@router.get("/", response_model=list[JobResponse])
def list_jobs(request: Request, db: Session = Depends(get_db)):
    """
    List jobs, ordered by title.

    Optional query filters (combined with AND):
    - minSalary: only jobs paying at least this much
    - hasEquity: true to only list jobs offering non-zero equity
    - title: case-insensitive substring of the title

    Any other query parameter is rejected with 400.
    """
    filter_by = dict(request.query_params)

    if not filter_by:
        return job_crud.find_all(db)

    logger.info(f"Listing jobs with filters {filter_by}")
    return job_crud.find_filtered(db, filter_by)


@router.get("/{job_id}", response_model=JobDetailResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a job by ID, with its company's public fields under `company`.
    """
    return job_crud.get(db, job_id)


@router.patch("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Partially update a job. Only fields present in the body change; send null
    to clear salary or equity.
    """
    return job_crud.update(db, job_id, request.model_dump(exclude_unset=True))


@router.delete("/{job_id}", status_code=204)
def delete_job(job_id: int, db: Session = Depends(get_db)):
    """
    Delete a job by ID.
    """
    job_crud.remove(db, job_id)
    return None
