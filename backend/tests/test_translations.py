from types import SimpleNamespace

from waqf.enums import Language
from waqf.translations import dedupe_languages, display_translation


def languages(body):
    return sorted(t['language'] for t in body['translations'])


def test_missing_language_returns_empty_translations_not_404(client, make_project):
    make_project(slug='daara-touba', languages=('FR', 'AR'))

    resp = client.get('/api/v1/projects/slug/daara-touba', params={'lang': 'EN'})
    assert resp.status_code == 200
    body = resp.json()
    assert body['slug'] == 'daara-touba'
    assert body['translations'] == []


def test_language_filter_keeps_only_requested_language(client, make_project):
    project = make_project(languages=('FR', 'EN', 'AR'))

    resp = client.get(f"/api/v1/projects/{project['id']}", params={'lang': 'AR'})
    assert resp.status_code == 200
    assert languages(resp.json()) == ['AR']

    resp = client.get(f"/api/v1/projects/{project['id']}")
    assert languages(resp.json()) == ['AR', 'EN', 'FR']


def test_unknown_language_is_rejected(client, make_project):
    make_project()
    resp = client.get('/api/v1/projects/slug/daara-touba', params={'lang': 'DE'})
    assert resp.status_code == 422


def test_unknown_slug_is_404(client):
    resp = client.get('/api/v1/projects/slug/nope')
    assert resp.status_code == 404


def test_replace_translations_leaves_no_stale_rows(client, make_project):
    project = make_project(languages=('FR', 'AR'))

    resp = client.put(f"/api/v1/projects/{project['id']}", json={
        "translations": [
            {"language": "EN", "title": "Well", "description": "A new well"},
            {"language": "FR", "title": "Puits", "description": "Un nouveau puits"},
        ]
    })
    assert resp.status_code == 200

    body = client.get(f"/api/v1/projects/{project['id']}").json()
    assert languages(body) == ['EN', 'FR']
    titles = {t['language']: t['title'] for t in body['translations']}
    assert titles == {'EN': 'Well', 'FR': 'Puits'}


def test_update_without_translations_keeps_them(client, make_project):
    project = make_project(languages=('FR', 'AR'))
    resp = client.put(f"/api/v1/projects/{project['id']}", json={"is_urgent": True})
    assert resp.status_code == 200
    assert resp.json()['is_urgent'] is True
    assert languages(resp.json()) == ['AR', 'FR']


def test_create_requires_at_least_one_translation(client):
    resp = client.post('/api/v1/projects', json={"slug": "empty", "goal_amount": 0, "translations": []})
    assert resp.status_code == 422


def test_duplicate_language_in_one_call_last_wins(client):
    resp = client.post('/api/v1/projects', json={
        "slug": "dup",
        "goal_amount": 1000,
        "translations": [
            {"language": "FR", "title": "Premier", "description": "x"},
            {"language": "FR", "title": "Second", "description": "y"},
        ],
    })
    assert resp.status_code == 200
    translations = resp.json()['translations']
    assert len(translations) == 1
    assert translations[0]['title'] == 'Second'


def test_list_applies_language_filter_to_every_item(client, make_project):
    make_project(slug='a', languages=('FR', 'EN'))
    make_project(slug='b', languages=('AR',))

    body = client.get('/api/v1/projects', params={'lang': 'EN'}).json()
    by_slug = {p['slug']: p for p in body['data']}
    assert languages(by_slug['a']) == ['EN']
    assert by_slug['b']['translations'] == []
    assert body['meta']['total'] == 2


def test_campaign_linked_projects_follow_language_filter(client, make_project):
    project = make_project(slug='puits', languages=('FR', 'EN'))
    resp = client.post('/api/v1/campaigns', json={
        "slug": "ramadan",
        "goal_amount": 1_000_000,
        "start_date": "2026-03-01T00:00:00",
        "end_date": "2026-03-30T00:00:00",
        "project_ids": [project['id']],
        "translations": [{"language": "FR", "title": "Ramadan", "description": "Campagne"}],
    })
    assert resp.status_code == 200

    body = client.get('/api/v1/campaigns/slug/ramadan', params={'lang': 'EN'}).json()
    assert body['translations'] == []
    assert [p['slug'] for p in body['projects']] == ['puits']
    assert languages(body['projects'][0]) == ['EN']


def test_category_translations_replaced(client):
    resp = client.post('/api/v1/products/categories', json={
        "slug": "livres",
        "translations": [{"language": "FR", "name": "Livres"}, {"language": "EN", "name": "Books"}],
    })
    category = resp.json()

    resp = client.put(f"/api/v1/products/categories/{category['id']}", json={
        "translations": [{"language": "AR", "name": "كتب"}],
    })
    assert resp.status_code == 200
    assert [t['language'] for t in resp.json()['translations']] == ['AR']


def test_dedupe_languages_keeps_last_entry():
    rows = dedupe_languages([
        {"language": Language.FR, "title": "a"},
        {"language": Language.EN, "title": "b"},
        {"language": Language.FR, "title": "c"},
    ])
    assert [(r['language'], r['title']) for r in rows] == [(Language.FR, 'c'), (Language.EN, 'b')]


def test_display_translation_falls_back_to_first():
    fr = SimpleNamespace(language=Language.FR, title='fr')
    ar = SimpleNamespace(language=Language.AR, title='ar')
    root = SimpleNamespace(translations=[fr, ar])

    assert display_translation(root, Language.AR) is ar
    assert display_translation(root, Language.EN) is fr
    assert display_translation(SimpleNamespace(translations=[]), Language.EN) is None
