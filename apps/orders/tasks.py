"""
Background execution of order fulfilment.

Work is submitted to an in-process thread pool once the creating
transaction has committed. With VOUCHER_TASKS_ALWAYS_EAGER it runs inline
instead (tests, management commands).
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from django.conf import settings
from django.db import close_old_connections, connections

logger = logging.getLogger(__name__)

_executor = None
_executor_lock = threading.Lock()


def get_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=settings.VOUCHER_TASK_WORKERS,
                thread_name_prefix='voucher-fulfilment',
            )
        return _executor


def run_order_fulfilment(order_id):
    """Worker entry point; owns its DB connection for the duration of the job."""
    from .services.fulfilment import fulfil_order

    close_old_connections()
    try:
        return fulfil_order(order_id)
    finally:
        connections.close_all()


def submit_order_fulfilment(order_id):
    """Queue PDF generation and emails for an order."""
    if settings.VOUCHER_TASKS_ALWAYS_EAGER:
        from .services.fulfilment import fulfil_order

        logger.debug("Running fulfilment of order %s inline", order_id)
        return fulfil_order(order_id)

    logger.info("Submitting fulfilment of order %s", order_id)
    return get_executor().submit(run_order_fulfilment, order_id)
