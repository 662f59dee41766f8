from fastapi import HTTPException
from sqlalchemy.orm import Query, Session


def coerce_id(value) -> int:
    """Turn a request value into a record id; anything unusable becomes 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    try:
        return max(int(str(value).strip()), 0)
    except ValueError:
        return 0


def get_or_404(db: Session, model, record_id, detail: str | None = None):
    record = db.get(model, coerce_id(record_id))
    if not record:
        raise HTTPException(status_code=404, detail=detail or f"{model.__name__} not found")
    return record


def apply_ordering(query: Query, order_by: str, order_dir: str, allowed_columns: dict) -> Query:
    if order_by not in allowed_columns:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid order_by. Allowed: {', '.join(sorted(allowed_columns))}",
        )
    column = allowed_columns[order_by]
    if order_dir == "desc":
        return query.order_by(column.desc())
    return query.order_by(column.asc())


def apply_pagination(query: Query, limit: int, offset: int) -> Query:
    return query.limit(limit).offset(offset)
