import os
import tempfile

from chalicelib.utils.boto_clients import s3_client, main_boto_region
from chalicelib.utils.logger import logger


def restaurant_images_bucket():
    return os.environ.get('RESTAURANT_IMAGES_BUCKET_NAME', 'restaurants')


def public_url(file_path):
    return f'https://{restaurant_images_bucket()}.s3.{main_boto_region}.amazonaws.com/{file_path}'


def upload_file_to_s3(body, file_path, content_type):
    """
    Uploads a publicly readable object, an existing object with the same key is replaced
    :return:
    public url of the object
    """
    with tempfile.TemporaryFile() as tf:
        tf.write(body)
        tf.seek(0)
        s3_client.upload_fileobj(tf, restaurant_images_bucket(), file_path, ExtraArgs={'ContentType': content_type})
        s3_client.put_object_acl(ACL='public-read', Bucket=restaurant_images_bucket(), Key=file_path)
    logger.info(f'upload_file_to_s3:: SUCCESS, {file_path=}')
    return public_url(file_path)
