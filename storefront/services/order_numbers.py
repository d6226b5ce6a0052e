# storefront/services/order_numbers.py
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.orm import Session

from storefront.repos.order_repo import OrderRepo
from storefront.utils.settings import ORDER_NUMBER_PREFIX

SEQUENCE_WIDTH = 3


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_order_number(prefix: str, sequence: int) -> str:
    # past 999 the number simply grows a digit
    return f"{prefix}{sequence:0{SEQUENCE_WIDTH}d}"


def next_sequence(prefix: str, latest: str | None) -> int:
    if not latest:
        return 1
    return int(latest[len(prefix):]) + 1


class OrderNumberGenerator:
    """
    Date-scoped sequential order numbers: ORD + UTC YYYYMMDD + 3-digit counter.

    The read-then-increment here is only a proposal; orders.order_number is
    unique, and OrderService retries the whole transaction when an insert
    loses the race for a number.
    """

    def __init__(
        self,
        db: Session,
        prefix: str = ORDER_NUMBER_PREFIX,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repo = OrderRepo(db)
        self.prefix = prefix
        self.clock = clock

    def date_prefix(self) -> str:
        return f"{self.prefix}{self.clock().astimezone(timezone.utc):%Y%m%d}"

    def next_number(self) -> str:
        prefix = self.date_prefix()
        latest = self.repo.latest_order_number(prefix)
        return format_order_number(prefix, next_sequence(prefix, latest))
