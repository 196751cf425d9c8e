import logging

from chalicelib.utils.logger import logger, log_exception, mask_secrets


def test_exception_is_prefixed_once(caplog):
    logger.current_request_id = 'abc123'
    try:
        raise RuntimeError('boom')
    except RuntimeError:
        with caplog.at_level(logging.ERROR, logger='food_delivery_admin'):
            logger.exception('failed')

    record = caplog.records[-1]
    assert record.getMessage() == '[abc123] : failed'
    assert record.exc_info[0] is RuntimeError


def test_log_exception_without_level_logs_an_error(caplog):
    logger.current_request_id = 'abc123'
    with caplog.at_level(logging.DEBUG, logger='food_delivery_admin'):
        log_exception(RuntimeError('boom'), msg='while testing')

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert record.getMessage().count('[abc123] : ') == 1
    assert '"exception": "RuntimeError"' in record.getMessage()


def test_mask_secrets():
    assert mask_secrets({'userId': 'u1', 'newPassword': 'x'}) == {'userId': 'u1', 'newPassword': '***'}
    assert mask_secrets(['not', 'a', 'dict']) == ['not', 'a', 'dict']
