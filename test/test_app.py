def test_index(client):
    response = client.http.get('/health-check')
    assert response.json_body == {'health': 'check'}


def test_malformed_body_is_bad_request(store, post):
    response = post('/riders/delete', raw_body='{"userId": ')
    assert response.status_code == 400
    assert response.json_body == {'error': 'Request body is not a valid JSON document'}
    assert store.calls == []


def test_non_object_body_is_bad_request(store, post):
    response = post('/restaurants/delete', raw_body='["r1"]')
    assert response.status_code == 400
    assert 'error' in response.json_body
