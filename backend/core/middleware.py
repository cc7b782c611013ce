import logging
import time

logger = logging.getLogger("backend.requests")


class RequestLoggingMiddleware:
    """
    Log one line per API request: method, path, status, duration and any
    list filters from the query string. Client errors log at WARNING and
    server errors at ERROR.
    """
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        start = time.monotonic()
        response = self.get_response(request)
        duration = time.monotonic() - start

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        filters = request.META.get('QUERY_STRING', '')
        logger.log(
            level,
            "%s %s %s %.3fs%s",
            request.method,
            request.path,
            response.status_code,
            duration,
            f" filters={filters}" if filters else '',
        )
        return response
