import functools
from typing import Callable

from chalice import Response
from chalice.app import Request

from chalicelib.utils.logger import logger, log_exception, bind_request


def json_response(body: dict, status_code: int = 200) -> Response:
    return Response(body=body, status_code=status_code, headers={'Content-Type': 'application/json'})


def error_response(error: Exception, msg: str = "", status_code: int = 500, *args, **kwargs) -> Response:
    log_exception(error, status_code, msg, *args, **kwargs)
    return json_response({'error': str(error)}, status_code=status_code)


def request_exception_handler(func: Callable):
    """
    Wraps an endpoint: binds the request to the logger and turns
    exceptions into {error} responses using the exception's STATUS_CODE
    """
    @functools.wraps(func)
    def result(*args, **kwargs):
        if args and isinstance(args[0], Request):
            bind_request(args[0])
        try:
            logger.info(f'Calling function {func.__name__}')
            return func(*args, **kwargs)
        except Exception as exception:
            return error_response(
                error=exception,
                msg=f'function = {func.__name__}, error = {exception}',
                status_code=getattr(exception, 'STATUS_CODE', 500))
    return result


def log_start_finish(func: Callable):
    @functools.wraps(func)
    def result(*args, **kwargs):
        logger.info(f'{func.__name__} ::: started')
        response = func(*args, **kwargs)
        logger.info(f'{func.__name__} ::: finished')
        return response
    return result
