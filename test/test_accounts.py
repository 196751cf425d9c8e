import re

import pytest

from chalicelib import accounts
from chalicelib.constants.constants import PASSWORD_CHARACTER_CLASSES, PASSWORD_CHARSET, PASSWORD_LENGTH
from chalicelib.utils.exceptions import DownstreamError

AMBIGUOUS_CHARACTERS = set('IOl01')


def test_generate_rider_id():
    for _ in range(200):
        assert re.fullmatch(r'rider[1-9]\d{5}', accounts.generate_rider_id())


def test_generate_password():
    for _ in range(200):
        password = accounts.generate_password()
        assert len(password) == PASSWORD_LENGTH
        assert set(password) <= set(PASSWORD_CHARSET)
        assert not set(password) & AMBIGUOUS_CHARACTERS


def test_generate_password_has_every_character_class():
    for _ in range(500):
        password = accounts.generate_password()
        for character_class in PASSWORD_CHARACTER_CLASSES:
            assert set(password) & set(character_class), f'{password} misses one of {character_class}'


def test_password_charset_has_no_ambiguous_characters():
    assert not set(PASSWORD_CHARSET) & AMBIGUOUS_CHARACTERS


def test_create_paired_account_shares_id(store):
    profile = accounts.create_paired_account(store, {'full_name': 'Asha', 'role': 'rider'}, 'pw', email='a@b.c')

    assert list(store.identities) == [profile['id']]
    assert store.tables['profiles'] == [{'full_name': 'Asha', 'role': 'rider', 'id': profile['id']}]
    assert store.identities[profile['id']]['attributes'] == {'name': 'Asha', 'role': 'rider'}


def test_create_paired_account_compensation(store):
    store.fail_on[('insert', 'profiles')] = 'profile insert failed'

    with pytest.raises(DownstreamError) as error:
        accounts.create_paired_account(store, {'full_name': 'Asha', 'role': 'rider'}, 'pw', email='a@b.c')

    assert str(error.value) == 'profile insert failed'
    assert error.value.compensated is True
    assert store.identities == {}


def test_create_paired_account_failed_compensation_keeps_profile_error(store):
    store.fail_on[('insert', 'profiles')] = 'profile insert failed'
    store.fail_on[('delete_identity', 'identities')] = 'identity service unavailable'

    with pytest.raises(DownstreamError, match='^profile insert failed$'):
        accounts.create_paired_account(store, {'full_name': 'Asha', 'role': 'rider'}, 'pw', email='a@b.c')

    assert ('delete_identity', 'identities') in store.operations()


def test_identity_failure_needs_no_compensation(store):
    store.fail_on[('create_identity', 'identities')] = 'email exists'

    with pytest.raises(DownstreamError, match='^email exists$') as error:
        accounts.create_paired_account(store, {'full_name': 'Asha', 'role': 'rider'}, 'pw', email='a@b.c')

    assert error.value.compensated is False
    assert store.operations() == [('create_identity', 'identities')]
