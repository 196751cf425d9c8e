from decimal import Decimal
from typing import Dict, List, Tuple

from chalice import Response

from chalicelib import accounts
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import ROLE_RESTAURANT
from chalicelib.constants.status_codes import http200, http400
from chalicelib.sequencer import Step, run_steps
from chalicelib.store import BackendStore, get_store
from chalicelib.utils import app as utils_app, data as utils_data
from chalicelib.utils.exceptions import DownstreamError, NotFoundError, ValidationError
from chalicelib.utils.logger import logger

# tables holding rows per order, cleaned before the orders themselves
ORDER_DEPENDENT_TABLES = (
    keys_structure.order_items_pk,
    keys_structure.order_assignments_pk,
    keys_structure.deliveries_pk,
    keys_structure.ratings_pk,
)

# tables holding rows per restaurant, cleaned before the restaurant
RESTAURANT_DEPENDENT_TABLES = (
    keys_structure.menu_items_pk,
    keys_structure.coupons_pk,
    keys_structure.payouts_pk,
)

REQUIRED_CREATE_FIELDS = ('name', 'email', 'password', 'phone', 'address')

RESTAURANT_DEFAULTS = {
    'delivery_fee': 0,
    'minimum_order': 0,
    'estimated_delivery_time': 30,
    'commission_percent': 15,
    'platform_fee_per_order': 5,
    'transaction_charge_percent': Decimal('2.5'),
}

OPTIONAL_RESTAURANT_FIELDS = ('image_url', 'latitude', 'longitude')


def delete_restaurant(store: BackendStore, restaurant_id: str) -> List[str]:
    """
    Deletes a restaurant with its orders and everything hanging off them.

    Order dependents go first, then the orders, then the restaurant's own
    tables and finally the restaurant. Reading the orders, deleting the
    orders and deleting the restaurant are fatal; the rest is best-effort.
    :return:
    warnings of the best-effort steps
    """
    if not restaurant_id:
        raise ValidationError('Restaurant ID is required')

    orders = store.select(keys_structure.orders_pk, 'restaurant_id', restaurant_id, fields=['id'])
    order_ids = [order['id'] for order in orders]
    logger.info(f"delete_restaurant ::: {restaurant_id=} has {len(order_ids)} orders")

    steps = []
    if order_ids:
        steps.extend(
            Step(f'delete {table}', _delete_in(store, table, 'order_id', order_ids))
            for table in ORDER_DEPENDENT_TABLES
        )
    steps.append(Step(f'delete {keys_structure.orders_pk}',
                      _delete(store, keys_structure.orders_pk, 'restaurant_id', restaurant_id),
                      fatal=True, error_prefix='Orders Delete Error'))
    steps.extend(
        Step(f'delete {table}', _delete(store, table, 'restaurant_id', restaurant_id))
        for table in RESTAURANT_DEPENDENT_TABLES
    )
    steps.append(Step(f'delete {keys_structure.restaurants_pk}',
                      _delete(store, keys_structure.restaurants_pk, 'id', restaurant_id), fatal=True))

    return run_steps('delete_restaurant', steps)


def _delete(store, table, column, value):
    return lambda: store.delete(table, column, value)


def _delete_in(store, table, column, values):
    return lambda: store.delete_in(table, column, values)


def update_restaurant_password(store: BackendStore, restaurant_id: str, new_password: str) -> None:
    if not restaurant_id or not new_password:
        raise ValidationError('Restaurant ID and New Password are required')

    try:
        owner = store.select_single(keys_structure.restaurant_owners_pk, 'restaurant_id', restaurant_id)
    except (NotFoundError, DownstreamError) as error:
        logger.error(f"update_restaurant_password ::: owner lookup failed: {error}")
        raise NotFoundError('Could not find owner for this restaurant') from error

    try:
        store.update_identity_password(owner['user_id'], new_password)
    except DownstreamError as error:
        raise DownstreamError(f'Failed to update password: {error}') from error
    logger.info(f"update_restaurant_password ::: {restaurant_id=} owner={owner['user_id']} updated")


def build_restaurant_record(body: Dict) -> Dict:
    record = {
        'name': body['name'],
        'email': body['email'],
        'phone': body['phone'],
        'address': body['address'],
        'is_active': True,
        'is_open': True,
        'show_menu_images': body['show_menu_images'] if body.get('show_menu_images') is not None else True,
    }
    for field, default in RESTAURANT_DEFAULTS.items():
        record[field] = body.get(field) or default
    for field in OPTIONAL_RESTAURANT_FIELDS:
        record[field] = body.get(field) or None
    return record


def create_restaurant(store: BackendStore, body: Dict) -> Tuple[Dict, str]:
    """
    Creates the owner account, the restaurant and the link between them.
    Anything already created is removed again when a later write fails.
    :return:
    restaurant record, owner user id
    """
    utils_data.require_fields(body, REQUIRED_CREATE_FIELDS, 'Missing required fields')

    try:
        profile = accounts.create_paired_account(
            store,
            profile={
                'email': body['email'],
                'full_name': body['name'],
                'role': ROLE_RESTAURANT,
                'phone': body['phone'],
                'is_active': True,
            },
            password=body['password'],
            email=body['email'],
            upsert=True
        )
    except DownstreamError as error:
        if not error.compensated:
            # nothing was created, the identity service rejected the owner account
            setattr(error, 'STATUS_CODE', http400)
        raise
    user_id = profile['id']

    try:
        restaurant = store.insert(keys_structure.restaurants_pk, build_restaurant_record(body))
    except DownstreamError as error:
        accounts.delete_paired_account(store, user_id)
        raise DownstreamError(f'Failed to create restaurant entry: {error}', compensated=True) from error

    try:
        store.insert(keys_structure.restaurant_owners_pk, {'user_id': user_id, 'restaurant_id': restaurant['id']})
    except DownstreamError as error:
        run_steps('create_restaurant rollback', [
            Step('delete restaurant', _delete(store, keys_structure.restaurants_pk, 'id', restaurant['id'])),
            Step('delete account', lambda: accounts.delete_paired_account(store, user_id)),
        ])
        raise DownstreamError(f'Failed to link owner: {error}', compensated=True) from error

    logger.info(f"create_restaurant ::: restaurant={restaurant['id']} owner={user_id} created")
    return restaurant, user_id


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_create_restaurant(request) -> Response:
    body = utils_data.parse_raw_body(request)
    restaurant, user_id = create_restaurant(get_store(), body)
    return utils_app.json_response({
        'success': True,
        'message': 'Restaurant created successfully',
        'restaurant': restaurant,
        'user_id': user_id
    }, status_code=http200)


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_delete_restaurant(request) -> Response:
    body = utils_data.parse_raw_body(request)
    warnings = delete_restaurant(get_store(), body.get('restaurantId'))
    return utils_app.json_response({
        'success': True,
        'message': 'Restaurant and related data deleted successfully',
        'warnings': warnings
    }, status_code=http200)


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_update_restaurant_password(request) -> Response:
    body = utils_data.parse_raw_body(request)
    update_restaurant_password(get_store(), body.get('restaurantId'), body.get('newPassword'))
    return utils_app.json_response({'success': True, 'message': 'Password updated successfully'},
                                   status_code=http200)
