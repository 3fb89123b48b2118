import logging
from functools import wraps


def call_counter(n, logger=None, message="'{name}' called {count} times"):
  """
  A function decorator that tallies the number of calls to the function it decorates
  and logs the count every n calls.

  Args:
    n: The number of calls between two log records.
    logger: Where to log, defaults to the logger of the decorated function's module.
    message: Format string receiving `name` and `count`.

  The running tally is exposed as the wrapper's `calls` attribute.
  """
  def decorator(func):
    log = logger or logging.getLogger(func.__module__)
    name = getattr(func, '__name__', type(func).__name__)

    @wraps(func)
    def wrapper(*args, **kwargs):
      wrapper.calls += 1
      if n and wrapper.calls % n == 0:
        log.info(message.format(name=name, count=wrapper.calls))
      return func(*args, **kwargs)

    wrapper.calls = 0
    return wrapper
  return decorator
