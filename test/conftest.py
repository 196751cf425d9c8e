import json
import os
from uuid import uuid4

import pytest
from chalice.test import Client

os.environ.setdefault('GEN_TABLE_NAME', 'food-delivery-admin-test')
os.environ.setdefault('COGNITO_USER_POOL_ID', 'eu-central-1_test')
os.environ.setdefault('COGNITO_USER_POOL_CLIENT_ID', 'test-client')
os.environ.setdefault('LOG_LEVEL', 'DEBUG')

from app import app  # noqa: E402
from chalicelib.store import BackendStore, set_store  # noqa: E402
from chalicelib.utils.exceptions import DownstreamError  # noqa: E402


class FakeStore(BackendStore):
    """
    In-memory backend: tables are lists of dicts, identities a dict.
    Every call is recorded in `calls`, `fail_on[(operation, table)]` makes a call raise.
    """

    def __init__(self, tables=None):
        self.tables = {name: [dict(row) for row in rows] for name, rows in (tables or {}).items()}
        self.identities = {}
        self.calls = []
        self.fail_on = {}

    def _record(self, operation, target, *args):
        self.calls.append((operation, target, *args))
        message = self.fail_on.get((operation, target))
        if message:
            raise DownstreamError(message)

    def rows(self, table):
        return self.tables.setdefault(table, [])

    def select(self, table, column, value, fields=None):
        self._record('select', table, column, value)
        rows = [row for row in self.rows(table) if row.get(column) == value]
        if fields:
            return [{field: row.get(field) for field in fields} for row in rows]
        return [dict(row) for row in rows]

    def insert(self, table, record, upsert=False):
        self._record('insert', table, dict(record))
        record = {'id': str(uuid4()), **record}
        if upsert:
            self.tables[table] = [row for row in self.rows(table) if row.get('id') != record['id']]
        self.rows(table).append(record)
        return dict(record)

    def update(self, table, values, column, value):
        self._record('update', table, dict(values), column, value)
        for row in self.rows(table):
            if row.get(column) == value:
                row.update(values)

    def delete(self, table, column, value):
        self._record('delete', table, column, value)
        self.tables[table] = [row for row in self.rows(table) if row.get(column) != value]

    def delete_in(self, table, column, values):
        self._record('delete_in', table, column, list(values))
        self.tables[table] = [row for row in self.rows(table) if row.get(column) not in values]

    def create_identity(self, password, email=None, phone=None, attributes=None):
        self._record('create_identity', 'identities', email, phone)
        identity_id = str(uuid4())
        self.identities[identity_id] = {
            'email': email, 'phone': phone, 'password': password, 'attributes': attributes or {}
        }
        return identity_id

    def delete_identity(self, identity_id):
        self._record('delete_identity', 'identities', identity_id)
        if identity_id not in self.identities:
            raise DownstreamError('User not found')
        del self.identities[identity_id]

    def update_identity_password(self, identity_id, password):
        self._record('update_identity_password', 'identities', identity_id)
        if identity_id not in self.identities:
            raise DownstreamError('User not found')
        self.identities[identity_id]['password'] = password

    def operations(self):
        return [(call[0], call[1]) for call in self.calls]


@pytest.fixture
def store():
    fake_store = FakeStore()
    set_store(fake_store)
    yield fake_store
    set_store(None)


@pytest.fixture
def client():
    with Client(app) as chalice_client:
        yield chalice_client


@pytest.fixture
def post(client):
    def make_request(endpoint, json_body=None, raw_body=None):
        body = raw_body if raw_body is not None else json.dumps(json_body or {})
        return client.http.post(endpoint, headers={'Content-Type': 'application/json'}, body=body)
    return make_request
