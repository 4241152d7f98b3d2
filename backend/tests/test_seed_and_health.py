import importlib.util
from pathlib import Path

from fastapi.testclient import TestClient
from sqlmodel import Session, select

from portfolio import models, seed
from portfolio.database import engine
from portfolio.main import app
from portfolio.repositories import ProjectRepository
from portfolio.utils import rate_limit
from portfolio.utils.rate_limit import InMemoryRateLimiter

client = TestClient(app)

SEED_SCRIPT = Path(__file__).resolve().parents[1] / 'scripts' / 'seed_content.py'


def _load_seed_script():
    spec = importlib.util.spec_from_file_location('seed_content', SEED_SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_seed_fills_empty_database_once(db_session):
    assert seed.seed_database(db_session) is True
    assert ProjectRepository(db_session).count() == len(seed.PROJECTS)
    assert seed.seed_database(db_session) is False
    assert ProjectRepository(db_session).count() == len(seed.PROJECTS)

    projects = client.get('/api/projects').json()
    assert [p['slug'] for p in projects] == [p['slug'] for p in seed.PROJECTS]
    assert len(client.get('/api/skills').json()) == len(seed.SKILLS)
    experiences = client.get('/api/experiences').json()
    assert experiences[0]['endDate'] is None


def test_seeded_skills_are_within_bounds():
    categories = {'Frontend', 'Backend', 'DevOps', 'Tools'}
    for _name, category, proficiency in seed.SKILLS:
        assert category in categories
        assert 0 <= proficiency <= 100


def test_seed_skips_when_projects_exist(db_session):
    db_session.add(models.Project(title='Mine', slug='mine', description='d', content='c'))
    db_session.commit()
    assert seed.seed_database(db_session) is False
    assert client.get('/api/skills').json() == []


def test_health_and_request_id():
    r = client.get('/health')
    assert r.status_code == 200
    assert r.json() == {'status': 'ok'}
    assert 'X-Request-ID' in r.headers


def test_request_id_is_propagated():
    r = client.get('/api/projects', headers={'X-Request-ID': 'abc123'})
    assert r.headers['X-Request-ID'] == 'abc123'


def test_home_page_links_docs():
    r = client.get('/')
    assert r.status_code == 200
    assert '/docs' in r.text


def test_rate_limiter_window():
    limiter = InMemoryRateLimiter()
    assert limiter.allow('k', 2, 60) == (True, 0)
    assert limiter.allow('k', 2, 60) == (True, 0)
    allowed, retry_after = limiter.allow('k', 2, 60)
    assert allowed is False
    assert 1 <= retry_after <= 60
    # keys are independent
    assert limiter.allow('other', 2, 60)[0] is True
    limiter.reset()
    assert limiter.allow('k', 2, 60)[0] is True


def test_rate_limiter_zero_limit_disables():
    limiter = InMemoryRateLimiter()
    for _ in range(5):
        assert limiter.allow('k', 0, 60) == (True, 0)


def test_rate_limiter_sweeps_idle_keys(monkeypatch):
    clock = [1000.0]
    monkeypatch.setattr(rate_limit.time, 'monotonic', lambda: clock[0])
    limiter = InMemoryRateLimiter()
    for host in range(50):
        limiter.allow(f'10.0.0.{host}:/api/messages', 5, 60)
    assert len(limiter) == 50
    clock[0] += 61
    limiter.allow('10.0.0.1:/api/messages', 5, 60)
    # only the key that was just hit survives the sweep
    assert len(limiter) == 1


def test_rate_limiter_keeps_active_keys_on_sweep(monkeypatch):
    clock = [1000.0]
    monkeypatch.setattr(rate_limit.time, 'monotonic', lambda: clock[0])
    limiter = InMemoryRateLimiter()
    limiter.allow('a', 2, 60)
    clock[0] += 50
    limiter.allow('b', 2, 60)
    clock[0] += 20
    limiter.allow('c', 2, 60)
    assert len(limiter) == 2
    assert limiter.allow('b', 2, 60) == (True, 0)
    assert limiter.allow('b', 2, 60)[0] is False


def test_seed_script_force_resets_content(db_session):
    db_session.add(models.Message(sender_name='Al', sender_email='a@b.com', subject='Hi!',
                                  message='This is a long enough message.'))
    db_session.add(models.Project(title='Mine', slug='mine', description='d', content='c'))
    db_session.commit()
    db_session.close()

    seed_content = _load_seed_script()
    seed_content.main(force=True)

    slugs = [p['slug'] for p in client.get('/api/projects').json()]
    assert slugs == [p['slug'] for p in seed.PROJECTS]
    assert len(client.get('/api/skills').json()) == len(seed.SKILLS)
    with Session(engine) as session:
        assert session.exec(select(models.Message)).all() == []


def test_seed_script_without_force_keeps_content(db_session):
    db_session.add(models.Project(title='Mine', slug='mine', description='d', content='c'))
    db_session.commit()
    db_session.close()

    _load_seed_script().main()
    assert [p['slug'] for p in client.get('/api/projects').json()] == ['mine']
