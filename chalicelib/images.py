import time
from email.parser import BytesParser
from email.policy import default as default_policy
from typing import Dict

from botocore.exceptions import BotoCoreError, ClientError
from chalice import Response

from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200
from chalicelib.store import BackendStore, get_store
from chalicelib.utils import app as utils_app
from chalicelib.utils.exceptions import DownstreamError, ValidationError
from chalicelib.utils.logger import logger, log_exception
from chalicelib.utils.s3 import upload_file_to_s3


def parse_multipart_request_data(current_request) -> Dict:
    """
    Form fields by name, each one the email.message part holding it
    """
    content_type = current_request.headers.get('content-type', '')
    message = BytesParser(policy=default_policy).parsebytes(
        f'Content-Type: {content_type}\r\n\r\n'.encode('utf-8') + (current_request.raw_body or b''))
    if not message.is_multipart():
        return {}
    return {part.get_param('name', header='content-disposition'): part for part in message.iter_parts()}


def image_file_name(restaurant_id: str, file_name: str) -> str:
    extension = file_name.rsplit('.', 1)[-1]
    return f'{restaurant_id}-{int(time.time() * 1000)}.{extension}'


def upload_restaurant_image(store: BackendStore, restaurant_id: str, file_name: str, content: bytes,
                            content_type: str) -> str:
    """
    Stores the image in the public bucket and points the restaurant's image_url at it
    :return:
    public url of the image
    """
    if not restaurant_id or not file_name or content is None:
        raise ValidationError('File and Restaurant ID are required')

    file_path = image_file_name(restaurant_id, file_name)
    try:
        url = upload_file_to_s3(content, file_path, content_type)
    except (ClientError, BotoCoreError) as error:
        log_exception(error, msg=f'upload_restaurant_image ::: {restaurant_id=} {file_path=}')
        raise DownstreamError(f'Failed to upload image: {error}') from error

    try:
        store.update(keys_structure.restaurants_pk, {'image_url': url}, 'id', restaurant_id)
    except DownstreamError as error:
        raise DownstreamError('Failed to update database') from error
    logger.info(f"upload_restaurant_image ::: {restaurant_id=} image_url={url}")
    return url


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_upload_restaurant_image(request) -> Response:
    fields = parse_multipart_request_data(request)
    file_part = fields.get('file')
    restaurant_part = fields.get('restaurantId')
    if file_part is None or not file_part.get_filename() or restaurant_part is None:
        raise ValidationError('File and Restaurant ID are required')

    url = upload_restaurant_image(
        get_store(),
        restaurant_id=restaurant_part.get_payload(decode=True).decode('utf-8').strip(),
        file_name=file_part.get_filename(),
        content=file_part.get_payload(decode=True),
        content_type=file_part.get_content_type()
    )
    return utils_app.json_response({'success': True, 'url': url}, status_code=http200)
