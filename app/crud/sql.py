"""
SQL fragment builders shared by the CRUD modules.
"""

from typing import Any, List, Mapping, NamedTuple

from app.core.exceptions import BadRequestError


class PartialUpdate(NamedTuple):
    """SET clause and the values bound to its placeholders, in order."""
    set_cols: str
    values: List[Any]


def sql_for_partial_update(
    data: Mapping[str, Any],
    field_to_column: Mapping[str, str]
) -> PartialUpdate:
    """
    Build the SET clause of a partial UPDATE.

    Every key in `data` becomes one `"<column>"=$<n>` fragment, numbered from 1
    in the mapping's iteration order. Keys missing from `field_to_column` are
    used as the column name unchanged. Values are passed through as-is, so an
    explicit None clears the column.

        >>> sql_for_partial_update({"firstName": "Aliya", "age": 32},
        ...                        {"firstName": "first_name"})
        PartialUpdate(set_cols='"first_name"=$1, "age"=$2', values=['Aliya', 32])

    Args:
        data: Field name -> new value
        field_to_column: Field name -> column name, for fields whose column differs

    Returns:
        PartialUpdate(set_cols, values)

    Raises:
        BadRequestError: If `data` is empty
    """
    keys = list(data)
    if not keys:
        raise BadRequestError("No data")

    cols = [
        f'"{field_to_column.get(key) or key}"=${idx}'
        for idx, key in enumerate(keys, start=1)
    ]

    return PartialUpdate(
        set_cols=", ".join(cols),
        values=[data[key] for key in keys],
    )
