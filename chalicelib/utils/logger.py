import json
import os
from datetime import datetime, date
from decimal import Decimal
from logging import setLoggerClass, Logger, NOTSET, getLogger, StreamHandler, Formatter
from uuid import uuid4

from chalice.app import Request

SECRET_FIELDS = ('password', 'newPassword', 'new_password')


class RequestLogger(Logger):
    """
    Prefixes every record with the id of the request being served
    """

    def __init__(self, name, level=NOTSET):
        self.current_request_id = None
        super(RequestLogger, self).__init__(name, level)

    def _with_request_id(self, msg):
        return f'[{self.current_request_id}] : {msg}'

    def debug(self, msg, *args, **kwargs):
        super(RequestLogger, self).debug(self._with_request_id(msg), *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        super(RequestLogger, self).info(self._with_request_id(msg), *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        super(RequestLogger, self).warning(self._with_request_id(msg), *args, **kwargs)

    def error(self, msg, *args, **kwargs):
        super(RequestLogger, self).error(self._with_request_id(msg), *args, **kwargs)

    def exception(self, msg, *args, exc_info=True, **kwargs):
        # Logger.exception delegates to self.error, which would prefix a second time
        super(RequestLogger, self).error(self._with_request_id(msg), *args, exc_info=exc_info, **kwargs)


def conf_logger(level):
    setLoggerClass(RequestLogger)
    logger_ = getLogger('food_delivery_admin')
    console_handler = StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(Formatter('%(asctime)s - %(levelname)s - %(message)s'))
    if logger_.hasHandlers():
        logger_.handlers.clear()
    logger_.addHandler(console_handler)
    logger_.setLevel(level)
    return logger_


logger = conf_logger(os.environ.get('LOG_LEVEL', 'DEBUG').upper())


class CustomJSONEncoder(json.JSONEncoder):
    def default(self, value):
        if isinstance(value, (datetime, date)):
            return str(value)
        if isinstance(value, Decimal):
            return float(value)
        return super(CustomJSONEncoder, self).default(value)


def mask_secrets(body):
    if not isinstance(body, dict):
        return body
    return {key: '***' if key in SECRET_FIELDS else value for key, value in body.items()}


def bind_request(request: Request):
    """
    Sets the short request id used as log prefix and logs the incoming request
    """
    lambda_context = getattr(request, 'lambda_context', None)
    aws_request_id = getattr(lambda_context, 'aws_request_id', None) or str(uuid4())
    logger.current_request_id = aws_request_id.split('-')[-1]

    headers = dict(request.headers)
    headers.pop('authorization', None)
    logger.info(f"Request: {request.method} {(request.context or {}).get('resourcePath')}, headers={json.dumps(headers)}")
    if headers.get('content-type', '') == 'application/json' and request.raw_body:
        try:
            body = json.loads(request.raw_body)
        except ValueError:
            body = '<not a json document>'
        logger.debug(f"Request body: {json.dumps(mask_secrets(body), cls=CustomJSONEncoder)}")


def log_exception(error: Exception, status_code: int = 500, msg: str = "", *args, **kwargs):
    allowed_log_levels = {
        'info': logger.info,
        'warning': logger.warning,
        'debug': logger.debug,
        'error': logger.error,
        'exception': logger.exception,
    }
    level = getattr(error, 'LEVEL', 'exception')
    log_level = level if level in allowed_log_levels else 'exception'
    allowed_log_levels[log_level](msg=json.dumps({
        'error': str(error),
        'exception': error.__class__.__name__,
        'message': str(msg),
        'level': log_level,
        'status_code': status_code,
        'args': args,
        'kwargs': kwargs
    }, cls=CustomJSONEncoder))
