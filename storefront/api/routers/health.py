from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.utils.retry import db_retry

router = APIRouter(tags=["health"])


@db_retry()
def _ping(db: Session) -> None:
    db.execute(text("SELECT 1"))


@router.get("/health")
def health(db: Session = Depends(get_db)):
    _ping(db)
    return {"status": "ok"}
