import os

ROLE_RIDER = 'rider'
ROLE_RESTAURANT = 'restaurant'

RIDER_ID_PREFIX = 'rider'
RIDER_EMAIL_DOMAIN = 'rider.local'

# I, O, l, 0 and 1 are left out on purpose
PASSWORD_UPPERCASE = 'ABCDEFGHJKLMNPQRSTUVWXYZ'
PASSWORD_LOWERCASE = 'abcdefghjkmnpqrstuvwxyz'
PASSWORD_DIGITS = '23456789'
PASSWORD_SYMBOLS = '!@#$%'
PASSWORD_CHARACTER_CLASSES = (PASSWORD_UPPERCASE, PASSWORD_LOWERCASE, PASSWORD_DIGITS, PASSWORD_SYMBOLS)
PASSWORD_CHARSET = ''.join(PASSWORD_CHARACTER_CLASSES)
PASSWORD_LENGTH = 12

PUSH_BATCH_SIZE = 100
DEFAULT_EXPO_PUSH_URL = 'https://exp.host/--/api/v2/push/send'


def cognito_user_pool_id():
    return os.environ['COGNITO_USER_POOL_ID']


def cognito_user_pool_client_id():
    return os.environ['COGNITO_USER_POOL_CLIENT_ID']


def expo_push_url():
    return os.environ.get('EXPO_PUSH_URL', DEFAULT_EXPO_PUSH_URL)


def push_request_timeout():
    return float(os.environ.get('PUSH_REQUEST_TIMEOUT', '30'))
