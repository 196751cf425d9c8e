import json
from typing import Dict, List

import requests
from chalice import Response

from chalicelib.constants.constants import PUSH_BATCH_SIZE, expo_push_url, push_request_timeout
from chalicelib.constants.status_codes import http200
from chalicelib.utils import app as utils_app, data as utils_data
from chalicelib.utils.exceptions import DownstreamError, ValidationError
from chalicelib.utils.logger import logger, log_exception, CustomJSONEncoder

PUSH_HEADERS = {
    'Accept': 'application/json',
    'Accept-encoding': 'gzip, deflate',
    'Content-Type': 'application/json',
}


def send_push_notifications(notifications: List[Dict]) -> List[Dict]:
    """
    Forwards push messages to the push service in batches of PUSH_BATCH_SIZE,
    one batch after another.
    :return:
    the push service reply of every batch
    """
    if not notifications or not isinstance(notifications, list):
        raise ValidationError('No notifications provided')

    results = []
    for batch in utils_data.chunks(notifications, PUSH_BATCH_SIZE):
        logger.info(f'send_push_notifications ::: sending batch of {len(batch)}')
        try:
            response = requests.post(
                expo_push_url(),
                data=json.dumps(batch, cls=CustomJSONEncoder),
                headers=PUSH_HEADERS,
                timeout=push_request_timeout()
            )
            results.append(response.json())
        except (requests.RequestException, ValueError) as error:
            log_exception(error, msg='send_push_notifications ::: push service call failed')
            raise DownstreamError(str(error)) from error
    return results


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_send_notifications(request) -> Response:
    notifications = utils_data.parse_raw_body(request).get('notifications')
    results = send_push_notifications(notifications)
    return utils_app.json_response({'success': True, 'results': results, 'count': len(notifications)},
                                   status_code=http200)
