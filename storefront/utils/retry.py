# storefront/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
from sqlalchemy.exc import OperationalError

from storefront.domain.errors import OrderNumberTaken
from storefront.utils.settings import ORDER_NUMBER_MAX_ATTEMPTS


def order_number_retry():
    # every attempt re-reads the latest order number in a new transaction
    return retry(
        reraise=True,
        stop=stop_after_attempt(ORDER_NUMBER_MAX_ATTEMPTS),
        wait=wait_exponential(multiplier=0.02, min=0.02, max=0.2),
        retry=retry_if_exception_type(OrderNumberTaken),
    )


def db_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(OperationalError),
    )
