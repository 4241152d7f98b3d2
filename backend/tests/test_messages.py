import pytest
from fastapi.testclient import TestClient
from sqlmodel import select

from portfolio import models
from portfolio.config import settings
from portfolio.main import app
from portfolio.utils.rate_limit import InMemoryRateLimiter

client = TestClient(app)

VALID = {
    'senderName': 'Al',
    'senderEmail': 'a@b.com',
    'subject': 'Hi!',
    'message': 'This is a long enough message.',
}


def test_valid_message_is_stored_unread(db_session):
    r = client.post('/api/messages', json=VALID)
    assert r.status_code == 200
    body = r.json()
    assert body['read'] is False
    assert body['senderName'] == 'Al'
    assert body['senderEmail'] == 'a@b.com'
    assert 'createdAt' in body
    stored = db_session.exec(select(models.Message)).all()
    assert [m.id for m in stored] == [body['id']]


@pytest.mark.parametrize('override', [
    {'senderName': 'A'},
    {'senderEmail': 'not-an-email'},
    {'senderEmail': 'a@'},
    {'subject': 'Hi'},
    {'message': 'too short'},
    {'message': None},
])
def test_invalid_message_is_400_and_not_persisted(db_session, override):
    r = client.post('/api/messages', json={**VALID, **override})
    assert r.status_code == 400
    assert r.json() == {'detail': 'invalid data'}
    assert db_session.exec(select(models.Message)).all() == []


def test_missing_field_is_400(db_session):
    payload = {k: v for k, v in VALID.items() if k != 'subject'}
    assert client.post('/api/messages', json=payload).status_code == 400
    assert db_session.exec(select(models.Message)).all() == []


def test_malformed_body_is_400():
    r = client.post('/api/messages', content=b'{not json', headers={'Content-Type': 'application/json'})
    assert r.status_code == 400


def test_client_cannot_preset_server_fields():
    r = client.post('/api/messages', json={**VALID, 'read': True, 'id': 999})
    assert r.status_code == 200
    assert r.json()['read'] is False
    assert r.json()['id'] != 999


def test_admin_inbox_and_read_flag(admin_headers):
    first = client.post('/api/messages', json=VALID).json()
    client.post('/api/messages', json={**VALID, 'subject': 'Second one'})

    inbox = client.get('/api/admin/messages', headers=admin_headers)
    assert inbox.status_code == 200
    assert [m['subject'] for m in inbox.json()] == ['Hi!', 'Second one']

    r = client.patch(f"/api/admin/messages/{first['id']}", json={'read': True}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()['read'] is True
    assert r.json()['message'] == first['message']

    r = client.patch(f"/api/admin/messages/{first['id']}", json={'read': False}, headers=admin_headers)
    assert r.json()['read'] is False


def test_only_read_flag_is_mutable(admin_headers):
    msg = client.post('/api/messages', json=VALID).json()
    r = client.patch(f"/api/admin/messages/{msg['id']}", json={'subject': 'Changed'}, headers=admin_headers)
    assert r.status_code == 400
    r = client.patch(f"/api/admin/messages/{msg['id']}", json={'read': True, 'subject': 'Changed'},
                     headers=admin_headers)
    assert r.status_code == 200
    assert r.json()['subject'] == 'Hi!'


def test_mark_missing_message_is_404(admin_headers):
    r = client.patch('/api/admin/messages/12345', json={'read': True}, headers=admin_headers)
    assert r.status_code == 404


def test_delete_message(admin_headers):
    msg = client.post('/api/messages', json=VALID).json()
    r = client.delete(f"/api/admin/messages/{msg['id']}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json() == {'success': True}
    assert client.get('/api/admin/messages', headers=admin_headers).json() == []
    assert client.delete(f"/api/admin/messages/{msg['id']}", headers=admin_headers).status_code == 404


def test_contact_rate_limit(monkeypatch):
    monkeypatch.setattr('portfolio.main._contact_rate_limiter', InMemoryRateLimiter())
    monkeypatch.setattr(settings, 'CONTACT_RATE_LIMIT_PER_MIN', 1)
    first = client.post('/api/messages', json=VALID)
    assert first.status_code == 200
    second = client.post('/api/messages', json=VALID)
    assert second.status_code == 429
    assert int(second.headers['Retry-After']) >= 1
