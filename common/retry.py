import functools
import logging
import time

import pika.exceptions

retry_logger = logging.getLogger("batam.retry")

RETRY_ON_FAILURE_ATTEMPTS = 3
RETRY_ON_FAILURE_DELAY = 1

# BrokerConnectionError derives from ConnectionError, so OSError covers it
TRANSIENT_ERRORS = (pika.exceptions.AMQPError, OSError)


def with_retry(operation, attempts=RETRY_ON_FAILURE_ATTEMPTS, delay=RETRY_ON_FAILURE_DELAY,
               retry_on=TRANSIENT_ERRORS, sleep=time.sleep):
    """Run *operation* until it succeeds or *attempts* runs out.

    Only exceptions listed in *retry_on* trigger another attempt; anything
    else propagates straight away. When the last attempt fails its
    exception is re-raised untouched.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be at least 1, got {attempts}")

    attempt = 0
    while True:
        attempt += 1
        try:
            return operation()
        except retry_on as e:
            if attempt >= attempts:
                retry_logger.error(f"Giving up after {attempt}/{attempts} attempts: {e}")
                raise
            retry_logger.warning(f"Attempt {attempt}/{attempts} failed: {e}. Retrying in {delay}s...")
            sleep(delay)


def retry_on_failure(method):
    """Wrap a bound method with the owner's retry policy.

    The instance must expose ``retry_attempts``, ``retry_delay`` and
    ``sleep``; this keeps the policy tunable per object.
    """
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        return with_retry(lambda: method(self, *args, **kwargs),
                          attempts=self.retry_attempts,
                          delay=self.retry_delay,
                          sleep=self.sleep)
    return wrapper
