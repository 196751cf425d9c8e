from typing import Dict, List, Optional
from uuid import uuid4

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import BotoCoreError, ClientError
from pycognito import Cognito

from chalicelib.constants import keys_structure
from chalicelib.constants.constants import cognito_user_pool_id, cognito_user_pool_client_id
from chalicelib.utils import db as utils_db, data as utils_data
from chalicelib.utils.boto_clients import cognito_client, main_boto_region
from chalicelib.utils.exceptions import DownstreamError, NotFoundError
from chalicelib.utils.logger import logger, log_exception

# DynamoDB limits the IN operator to 100 operands
MAX_IN_OPERANDS = 100

_STORE = None


class BackendStore:
    """
    Table-scoped CRUD plus the identity surface every flow talks to.
    Failures of the remote calls are raised as DownstreamError.
    """

    def select(self, table: str, column: str, value, fields: Optional[List[str]] = None) -> List[Dict]:
        raise NotImplementedError

    def select_single(self, table: str, column: str, value) -> Dict:
        rows = self.select(table, column, value)
        if not rows:
            raise NotFoundError(f'No {table} record with {column}={value}')
        return rows[0]

    def insert(self, table: str, record: Dict, upsert: bool = False) -> Dict:
        raise NotImplementedError

    def update(self, table: str, values: Dict, column: str, value) -> None:
        raise NotImplementedError

    def delete(self, table: str, column: str, value) -> None:
        raise NotImplementedError

    def delete_in(self, table: str, column: str, values: List) -> None:
        raise NotImplementedError

    def create_identity(self, password: str, email: Optional[str] = None, phone: Optional[str] = None,
                        attributes: Optional[Dict] = None) -> str:
        raise NotImplementedError

    def delete_identity(self, identity_id: str) -> None:
        raise NotImplementedError

    def update_identity_password(self, identity_id: str, password: str) -> None:
        raise NotImplementedError


class DynamoCognitoStore(BackendStore):
    """
    Tables are partitions of the general DynamoDB table, identities are Cognito users
    whose username is the profile id
    """

    @staticmethod
    def _sortkey_column(table):
        return keys_structure.sortkey_columns.get(table, 'id')

    @staticmethod
    def _strip_keys(item: Dict) -> Dict:
        return {key: value for key, value in item.items() if key not in ('partkey', 'sortkey')}

    def _query(self, table, column, condition, fields=None) -> List[Dict]:
        if column == self._sortkey_column(table) and not isinstance(condition, list):
            key_condition = Key('partkey').eq(table) & Key('sortkey').eq(
                keys_structure.record_sk.format(record_id=condition))
            return utils_db.query_items_paged(key_condition, projection_fields=fields)

        key_condition = Key('partkey').eq(table)
        if isinstance(condition, list):
            items = []
            for values in utils_data.chunks(condition, MAX_IN_OPERANDS):
                items.extend(utils_db.query_items_paged(
                    key_condition, filter_expression=Attr(column).is_in(values), projection_fields=fields))
            return items
        return utils_db.query_items_paged(key_condition, filter_expression=Attr(column).eq(condition),
                                          projection_fields=fields)

    def _matching_keys(self, table, column, condition) -> List[Dict]:
        items = self._query(table, column, condition, fields=['partkey', 'sortkey'])
        return [{'partkey': item['partkey'], 'sortkey': item['sortkey']} for item in items]

    def select(self, table, column, value, fields=None):
        items = self._query(table, column, value, fields=fields)
        return [self._strip_keys(item) for item in items]

    def insert(self, table, record, upsert=False):
        record = {'id': str(uuid4()), **record}
        sortkey = keys_structure.record_sk.format(record_id=record[self._sortkey_column(table)])
        utils_db.put_db_record({'partkey': table, 'sortkey': sortkey, **record}, overwrite=upsert)
        logger.info(f"insert ::: {table=} sortkey={sortkey} successfully created")
        return record

    def update(self, table, values, column, value):
        keys = self._matching_keys(table, column, value)
        for key in keys:
            utils_db.update_db_record(key, values)
        logger.info(f"update ::: {table=} {column=} {value=}, {len(keys)} records updated")

    def delete(self, table, column, value):
        utils_db.delete_db_records(self._matching_keys(table, column, value))

    def delete_in(self, table, column, values):
        utils_db.delete_db_records(self._matching_keys(table, column, list(values)))

    @staticmethod
    def _cognito(username=None) -> Cognito:
        return Cognito(cognito_user_pool_id(), cognito_user_pool_client_id(),
                       user_pool_region=main_boto_region, username=username)

    def create_identity(self, password, email=None, phone=None, attributes=None):
        identity_id = str(uuid4())
        cognito_attributes = dict(attributes or {})
        if email:
            cognito_attributes.update(email=email, email_verified='true')
        if phone:
            cognito_attributes.update(phone_number=phone, phone_number_verified='true')
        try:
            self._cognito().admin_create_user(
                identity_id,
                temporary_password=password,
                additional_kwargs={'MessageAction': 'SUPPRESS'},
                attr_map={'custom:role': 'role'},
                **cognito_attributes
            )
        except (ClientError, BotoCoreError) as error:
            log_exception(error, msg=f'create_identity ::: {email=} {phone=}')
            raise DownstreamError(str(error)) from error

        try:
            # permanent password confirms the account, no first-login challenge
            cognito_client.admin_set_user_password(
                UserPoolId=cognito_user_pool_id(), Username=identity_id, Password=password, Permanent=True)
        except (ClientError, BotoCoreError) as error:
            log_exception(error, msg=f'create_identity ::: confirming {identity_id=} failed, deleting it')
            try:
                self._cognito(username=identity_id).admin_delete_user()
            except (ClientError, BotoCoreError) as cleanup_error:
                log_exception(cleanup_error, msg=f'create_identity ::: orphaned identity {identity_id}')
            raise DownstreamError(str(error), compensated=True) from error
        logger.info(f"create_identity ::: {identity_id=} successfully created")
        return identity_id

    def delete_identity(self, identity_id):
        try:
            self._cognito(username=identity_id).admin_delete_user()
        except (ClientError, BotoCoreError) as error:
            log_exception(error, msg=f'delete_identity ::: {identity_id=}')
            raise DownstreamError(str(error)) from error
        logger.info(f"delete_identity ::: {identity_id=} successfully deleted")

    def update_identity_password(self, identity_id, password):
        try:
            cognito_client.admin_set_user_password(
                UserPoolId=cognito_user_pool_id(), Username=identity_id, Password=password, Permanent=True)
        except (ClientError, BotoCoreError) as error:
            log_exception(error, msg=f'update_identity_password ::: {identity_id=}')
            raise DownstreamError(str(error)) from error
        logger.info(f"update_identity_password ::: {identity_id=} password updated")


def get_store() -> BackendStore:
    global _STORE
    if _STORE is None:
        _STORE = DynamoCognitoStore()
    return _STORE


def set_store(store: Optional[BackendStore]) -> None:
    global _STORE
    _STORE = store
