from typing import Dict, List, Optional

from chalice import Response

from chalicelib import accounts
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import ROLE_RIDER, RIDER_EMAIL_DOMAIN
from chalicelib.constants.status_codes import http200, http201
from chalicelib.sequencer import Step, run_steps
from chalicelib.store import BackendStore, get_store
from chalicelib.utils import app as utils_app, data as utils_data
from chalicelib.utils.exceptions import DownstreamError, ValidationError
from chalicelib.utils.logger import logger


def provision_rider(store: BackendStore, full_name: str, phone: Optional[str] = None) -> Dict:
    """
    Creates a rider with generated login and password.
    The returned password is the only copy, it is not stored anywhere.
    """
    if not full_name:
        raise ValidationError('Full name is required')

    rider_id = accounts.generate_rider_id()
    email = f'{rider_id}@{RIDER_EMAIL_DOMAIN}'
    password = accounts.generate_password()
    profile = accounts.create_paired_account(
        store,
        profile={'full_name': full_name, 'email': email, 'phone': phone or None, 'role': ROLE_RIDER},
        password=password,
        email=email
    )
    logger.info(f"provision_rider ::: rider {rider_id} created with id={profile['id']}")
    return {
        'id': profile['id'],
        'riderId': rider_id,
        'email': email,
        'password': password,
        'full_name': full_name,
        'phone': phone,
    }


def register_rider(store: BackendStore, full_name: str, phone: str, email: Optional[str] = None,
                   vehicle_type: Optional[str] = None, vehicle_number: Optional[str] = None,
                   aadhar_number: Optional[str] = None) -> Dict:
    """
    Creates a rider who signs in with the phone number
    """
    if not full_name or not phone:
        raise ValidationError('Name and phone are required')

    return accounts.create_paired_account(
        store,
        profile={
            'full_name': full_name,
            'phone': phone,
            'email': email or None,
            'vehicle_type': vehicle_type or None,
            'vehicle_number': vehicle_number or None,
            'aadhar_number': aadhar_number or None,
            'role': ROLE_RIDER
        },
        password=accounts.generate_password(),
        email=email or None,
        phone=phone
    )


def delete_rider(store: BackendStore, user_id: str) -> List[str]:
    """
    Removes the rider's live status, assignments, profile and identity.
    Deliveries keep their history, only the rider reference is cleared.
    Only the identity deletion is fatal.
    :return:
    warnings of the best-effort steps
    """
    if not user_id:
        raise ValidationError('User ID is required')

    return run_steps('delete_rider', [
        Step('delete rider_live_status',
             lambda: store.delete(keys_structure.rider_live_status_pk, 'rider_id', user_id)),
        Step('delete order_assignments',
             lambda: store.delete(keys_structure.order_assignments_pk, 'rider_id', user_id)),
        Step('unassign deliveries',
             lambda: store.update(keys_structure.deliveries_pk, {'rider_id': None}, 'rider_id', user_id)),
        Step('delete profile',
             lambda: store.delete(keys_structure.profiles_pk, 'id', user_id)),
        Step('delete identity', lambda: store.delete_identity(user_id), fatal=True),
    ])


def reset_rider_password(store: BackendStore, user_id: str, new_password: str) -> None:
    if not user_id or not new_password:
        raise ValidationError('User ID and New Password are required')
    store.update_identity_password(user_id, new_password)
    logger.info(f"reset_rider_password ::: {user_id=} password reset")


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_create_rider(request) -> Response:
    body = utils_data.parse_raw_body(request)
    rider = provision_rider(get_store(), body.get('full_name'), body.get('phone'))
    return utils_app.json_response({'success': True, 'rider': rider}, status_code=http200)


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_register_rider(request) -> Response:
    body = utils_data.parse_raw_body(request)
    try:
        profile = register_rider(
            get_store(),
            full_name=body.get('full_name'),
            phone=body.get('phone'),
            email=body.get('email'),
            vehicle_type=body.get('vehicle_type'),
            vehicle_number=body.get('vehicle_number'),
            aadhar_number=body.get('aadhar_number')
        )
    except DownstreamError as error:
        # this route reports provisioning failures as bad requests
        setattr(error, 'STATUS_CODE', 400)
        raise
    return utils_app.json_response({'data': profile}, status_code=http201)


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_delete_rider(request) -> Response:
    body = utils_data.parse_raw_body(request)
    warnings = delete_rider(get_store(), body.get('userId'))
    return utils_app.json_response({'success': True, 'warnings': warnings}, status_code=http200)


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_reset_rider_password(request) -> Response:
    body = utils_data.parse_raw_body(request)
    reset_rider_password(get_store(), body.get('userId'), body.get('newPassword'))
    return utils_app.json_response({'success': True}, status_code=http200)
