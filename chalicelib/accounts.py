import secrets
from typing import Dict, Optional

from chalicelib.constants import keys_structure
from chalicelib.constants.constants import (
    PASSWORD_CHARACTER_CLASSES, PASSWORD_CHARSET, PASSWORD_LENGTH, RIDER_ID_PREFIX
)
from chalicelib.store import BackendStore
from chalicelib.utils import data as utils_data
from chalicelib.utils.exceptions import DownstreamError
from chalicelib.utils.logger import logger, log_exception


def generate_rider_id() -> str:
    """
    Human readable login, e.g. rider483920. Not checked against existing riders.
    """
    return f'{RIDER_ID_PREFIX}{100000 + secrets.randbelow(900000)}'


def generate_password(length: int = PASSWORD_LENGTH) -> str:
    """
    One character of every class the user pool policy requires, the rest drawn from the whole charset
    """
    required = [secrets.choice(character_class) for character_class in PASSWORD_CHARACTER_CLASSES]
    characters = required + [secrets.choice(PASSWORD_CHARSET) for _ in range(length - len(required))]
    secrets.SystemRandom().shuffle(characters)
    return ''.join(characters)


def create_paired_account(store: BackendStore, profile: Dict, password: str, email: Optional[str] = None,
                          phone: Optional[str] = None, upsert: bool = False) -> Dict:
    """
    Creates an identity and the profile sharing its id.

    If the profile can't be written the identity is deleted again and the
    profile error is raised with compensated=True. A failing identity
    deletion is only logged.
    :return:
    the profile record
    """
    logger.info(f"create_paired_account ::: started, role={profile.get('role')}")
    identity_id = store.create_identity(
        password, email=email, phone=phone,
        attributes=utils_data.cleanup_dict({'name': profile.get('full_name'), 'role': profile.get('role')})
    )

    try:
        record = store.insert(keys_structure.profiles_pk, {**profile, 'id': identity_id}, upsert=upsert)
    except Exception as profile_error:
        logger.error(f"create_paired_account ::: profile for {identity_id=} failed, deleting identity")
        try:
            store.delete_identity(identity_id)
        except Exception as cleanup_error:
            log_exception(cleanup_error, msg=f'create_paired_account ::: orphaned identity {identity_id}')
        raise DownstreamError(str(profile_error), compensated=True) from profile_error

    logger.info(f"create_paired_account ::: {identity_id=} finished")
    return record


def delete_paired_account(store: BackendStore, identity_id: str) -> None:
    """
    Compensation for flows which fail after the account exists
    """
    for cleanup in (lambda: store.delete(keys_structure.profiles_pk, 'id', identity_id),
                    lambda: store.delete_identity(identity_id)):
        try:
            cleanup()
        except Exception as cleanup_error:
            log_exception(cleanup_error, msg=f'delete_paired_account ::: {identity_id=}')
