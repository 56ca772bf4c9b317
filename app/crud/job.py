"""
CRUD operations for jobs.

Implements the Repository pattern over the jobs table with hand-written,
positionally bound SQL (see app.core.database.run_query). Records are plain
dicts keyed by the API's field names:

    { id, title, salary, equity, companyHandle }

Missing entities and bad input raise NotFoundError / BadRequestError;
database errors (connectivity, constraint violations) propagate unchanged.
"""

import logging
import math
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Tuple, Union

from sqlalchemy.orm import Session

from app.core.database import run_query
from app.core.exceptions import BadRequestError, NotFoundError
from app.crud.sql import sql_for_partial_update

logger = logging.getLogger(__name__)

# Fields a partial update may touch, and the column each one writes.
# id and companyHandle are immutable.
JOB_UPDATE_COLUMNS: Dict[str, str] = {
    "title": "title",
    "salary": "salary",
    "equity": "equity",
}

# Text cast keeps PostgreSQL's exact NUMERIC digits. SQLite applies NUMERIC
# affinity on insert, so there "1.0" comes back as "1" and "0.10" as "0.1".
_JOB_COLUMNS = (
    'id, title, salary, CAST(equity AS TEXT) AS equity, company_handle AS "companyHandle"'
)

_COMPANY_PUBLIC_COLUMNS = (
    'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'
)

# salary is compared against a bigint at most
_MAX_SALARY_FILTER = 2 ** 63 - 1


class FilterClause(NamedTuple):
    """WHERE fragment with one `{}` slot per bound value."""
    template: str
    values: Tuple[Any, ...]


def _coerce_bool(val: str) -> Optional[bool]:
    sval = val.strip().lower()
    if sval in {"1", "true", "yes", "y"}:
        return True
    if sval in {"0", "false", "no", "n", ""}:
        return False
    return None


def _parse_number(value: Any) -> Optional[Union[int, float]]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass

    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def _min_salary_clause(value: Any) -> FilterClause:
    number = _parse_number(value)
    if number is None:
        raise BadRequestError("minSalary must be a number.")
    if abs(number) > _MAX_SALARY_FILTER:
        raise BadRequestError("minSalary is out of range.")

    return FilterClause("salary >= {}", (number,))


def _has_equity_clause(value: Any) -> Optional[FilterClause]:
    # Query strings arrive as text; anything else goes by truthiness
    if isinstance(value, str):
        has_equity = _coerce_bool(value)
        if has_equity is None:
            raise BadRequestError("hasEquity must be a boolean.")
    else:
        has_equity = bool(value)

    if not has_equity:
        return None
    return FilterClause("equity > 0", ())


def _title_clause(value: Any) -> FilterClause:
    if not isinstance(value, str):
        raise BadRequestError("title must be a string.")

    needle = (
        value.lower()
        .replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )
    return FilterClause("LOWER(title) LIKE {} ESCAPE '\\'", (f"%{needle}%",))


_FILTER_CLAUSES: Dict[str, Callable[[Any], Optional[FilterClause]]] = {
    "minSalary": _min_salary_clause,
    "hasEquity": _has_equity_clause,
    "title": _title_clause,
}


def compile_job_filters(filter_by: Mapping[str, Any]) -> Tuple[str, List[Any]]:
    """
    Compile search filters into a WHERE clause and its bound values.

    Recognized keys:
        minSalary: salary >= value (must be numeric)
        hasEquity: when true, equity > 0; when false, no constraint
        title: case-insensitive substring match on title

    Clauses are ANDed in the order the keys were given. Placeholders are
    numbered $1..$n across the whole clause; no value is ever written into
    the SQL text.

    Args:
        filter_by: Filter key -> value

    Returns:
        (where_clause, values)

    Raises:
        BadRequestError: If filter_by is empty, a key is unknown, or a value
            has the wrong type
    """
    if not filter_by:
        raise BadRequestError("No data to filter by")

    clauses: List[str] = []
    values: List[Any] = []

    for key, value in filter_by.items():
        build_clause = _FILTER_CLAUSES.get(key)
        if build_clause is None:
            raise BadRequestError(f"Invalid filter key: {key}")

        clause = build_clause(value)
        if clause is None:
            continue

        placeholders = [
            f"${len(values) + idx}" for idx in range(1, len(clause.values) + 1)
        ]
        clauses.append(clause.template.format(*placeholders))
        values.extend(clause.values)

    # Only hasEquity=false was given: nothing to constrain
    where_clause = " AND ".join(clauses) if clauses else "1 = 1"
    return where_clause, values


def create(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a new job in the database.

    Args:
        db: Database session
        data: { title, salary, equity, companyHandle }; salary and equity
            may be omitted

    Returns:
        { id, title, salary, equity, companyHandle }
    """
    rows = run_query(
        db,
        f"""INSERT INTO jobs
            (title, salary, equity, company_handle)
            VALUES ($1, $2, $3, $4)
            RETURNING {_JOB_COLUMNS}""",
        [
            data.get("title"),
            data.get("salary"),
            data.get("equity"),
            data.get("companyHandle"),
        ],
    )
    db.commit()

    job = rows[0]
    logger.info(f"Created job {job['id']}: {job['title']} ({job['companyHandle']})")
    return job


def find_all(db: Session) -> List[Dict[str, Any]]:
    """Return every job, ordered by title."""
    rows = run_query(
        db,
        f"""SELECT {_JOB_COLUMNS}
            FROM jobs
            ORDER BY title""",
    )
    return rows


def find_filtered(db: Session, filter_by: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """
    Return jobs matching every filter in `filter_by`, ordered by title.

    See compile_job_filters for the accepted keys.

    Example: GET /jobs?minSalary=500 -> find_filtered(db, {"minSalary": "500"})
    """
    where_clause, values = compile_job_filters(filter_by)

    rows = run_query(
        db,
        f"""SELECT {_JOB_COLUMNS}
            FROM jobs
            WHERE {where_clause}
            ORDER BY title""",
        values,
    )
    logger.debug(f"Filter {dict(filter_by)} matched {len(rows)} job(s)")
    return rows


def get(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Retrieve a job with its company inlined.

    The job and its company are read with two separate statements, so a
    concurrent update between them can produce a stale pairing.

    Args:
        db: Database session
        job_id: Job ID to retrieve

    Returns:
        { id, title, salary, equity,
          company: { handle, name, description, numEmployees, logoUrl } }

    Raises:
        NotFoundError: If no job has this id
    """
    rows = run_query(
        db,
        f"""SELECT {_JOB_COLUMNS}
            FROM jobs
            WHERE id = $1""",
        [job_id],
    )
    if not rows:
        logger.warning(f"Job {job_id} not found")
        raise NotFoundError(f"No job with id: {job_id}")

    job = rows[0]

    company_rows = run_query(
        db,
        f"""SELECT {_COMPANY_PUBLIC_COLUMNS}
            FROM companies
            WHERE handle = $1""",
        [job["companyHandle"]],
    )

    del job["companyHandle"]
    job["company"] = company_rows[0] if company_rows else None
    return job


def update(db: Session, job_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job.

    Only the supplied fields change; a field given as None is set to NULL.

    Args:
        db: Database session
        job_id: Job ID to update
        data: Any subset of { title, salary, equity }

    Returns:
        { id, title, salary, equity, companyHandle }

    Raises:
        BadRequestError: If data is empty or holds a field that cannot be updated
        NotFoundError: If no job has this id
    """
    for key in data:
        if key not in JOB_UPDATE_COLUMNS:
            raise BadRequestError(f"Invalid update field: {key}")

    set_cols, values = sql_for_partial_update(data, JOB_UPDATE_COLUMNS)
    id_var_idx = f"${len(values) + 1}"

    rows = run_query(
        db,
        f"""UPDATE jobs
            SET {set_cols}
            WHERE id = {id_var_idx}
            RETURNING {_JOB_COLUMNS}""",
        [*values, job_id],
    )
    if not rows:
        logger.warning(f"Job {job_id} not found for update")
        raise NotFoundError(f"No job with id: {job_id}")

    db.commit()
    logger.info(f"Updated job {job_id}: {', '.join(data)}")
    return rows[0]


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job by ID.

    Raises:
        NotFoundError: If no job has this id
    """
    rows = run_query(
        db,
        """DELETE
           FROM jobs
           WHERE id = $1
           RETURNING id""",
        [job_id],
    )
    if not rows:
        logger.warning(f"Job {job_id} not found for delete")
        raise NotFoundError(f"No job with id: {job_id}")

    db.commit()
    logger.info(f"Deleted job {job_id}")
