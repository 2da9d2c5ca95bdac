"""
Shared logging configuration.

Every handler logs through ``logger`` so records carry the same service name
and Lambda keys. Tracebacks are flattened to one line so CloudWatch keeps
each failure in a single event.
"""
import os
import sys
import json
import traceback
from typing import Any, Dict, Optional

from aws_lambda_powertools import Logger

def format_exception(exc_info) -> Optional[str]:
    """Format exception info into a single line."""
    if exc_info is True:
        exc_info = sys.exc_info()
    elif isinstance(exc_info, BaseException):
        exc_info = (type(exc_info), exc_info, exc_info.__traceback__)

    if exc_info and isinstance(exc_info, tuple) and len(exc_info) == 3 and exc_info[0] is not None:
        try:
            trace = ''.join(traceback.format_exception(*exc_info))
            return trace.replace('\n', ' | ').strip()
        except Exception as e:
            return f"Error formatting exception: {str(e)}"
    return None

def error_context(error: BaseException, **context: Any) -> Dict[str, Any]:
    """
    Build the structured ``extra`` keys for a failure.

    Example:
        >>> error_context(StageLookupError("IVF_CD1"), cycle_id="c1")["error_type"]
        'StageLookupError'
    """
    return {
        "error": str(error),
        "error_type": error.__class__.__name__,
        **context
    }

class SingleLineLogger(Logger):
    """Logger that writes exception tracebacks on a single line."""

    def exception(self, message, *args, **kwargs):
        exc_info = kwargs.pop('exc_info', True)
        extra = kwargs.pop('extra', {})
        extra['exception'] = format_exception(exc_info)
        kwargs['exc_info'] = False
        kwargs['extra'] = extra
        super().exception(message, *args, **kwargs)

logger = SingleLineLogger(
    service=os.environ.get('POWERTOOLS_SERVICE_NAME', 'fertility_tracker'),
    level=os.environ.get('LOG_LEVEL', 'INFO'),
    log_uncaught_exceptions=True,
    json_serializer=lambda record: json.dumps(record, default=str),
    use_rfc3339=True
)

logger.append_keys(
    region=os.environ.get('AWS_REGION'),
    function=os.environ.get('AWS_LAMBDA_FUNCTION_NAME'),
    version=os.environ.get('AWS_LAMBDA_FUNCTION_VERSION')
)

def log_exception(target: Logger, message: str, error: Optional[BaseException] = None, **kwargs) -> None:
    """
    Log a handled failure at error level with a single-line traceback.

    Args:
        target: Logger to write to
        message: Log message
        error: Handled exception, defaults to the one being handled
        **kwargs: Passed to ``Logger.error``; ``extra`` is merged
    """
    extra = kwargs.pop('extra', {})
    if error is not None:
        extra = {**error_context(error), **extra}
    extra['exception'] = format_exception(error if error is not None else sys.exc_info())
    target.error(message, extra=extra, **kwargs)
