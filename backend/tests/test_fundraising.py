import datetime
import re

import pytest

from waqf import donation_schemas, fundraising
from waqf.config import settings
from waqf.donation_models import Donation, Transaction
from waqf.enums import PaymentMethod, TransactionStatus
from waqf.errors import Conflict, NotFound
from waqf.payments import PaymentProvider, PlaceholderCheckout


def donate(client, amount, **extra):
    resp = client.post('/api/v1/donations', json={"amount": amount, "payment_method": "WAVE", **extra})
    assert resp.status_code == 200, resp.text
    return resp.json()


def confirm(client, donation_id, ref='WAVE-REF-1', headers=None):
    return client.post(f'/api/v1/donations/{donation_id}/confirm', json={"provider_ref": ref}, headers=headers)


def test_confirm_payment_scenario(client, make_project):
    project = make_project(goal_amount=25_000_000)
    checkout = donate(client, 5_000_000, project_id=project['id'])

    resp = confirm(client, checkout['donation']['id'])
    assert resp.status_code == 200
    tx = resp.json()['transaction']
    assert tx['status'] == 'SUCCESS'
    assert tx['provider_ref'] == 'WAVE-REF-1'
    assert tx['paid_at'] is not None

    body = client.get(f"/api/v1/projects/{project['id']}").json()
    assert body['collected_amount'] == 5_000_000
    assert body['donor_count'] == 1

    resp = confirm(client, checkout['donation']['id'], ref='WAVE-REF-2')
    assert resp.status_code == 409

    body = client.get(f"/api/v1/projects/{project['id']}").json()
    assert body['collected_amount'] == 5_000_000
    assert body['donor_count'] == 1
    again = client.get(f"/api/v1/donations/{checkout['donation']['id']}").json()
    assert again['transaction']['provider_ref'] == 'WAVE-REF-1'


def test_pending_donation_does_not_move_counters(client, make_project):
    project = make_project()
    donate(client, 10_000, project_id=project['id'])

    body = client.get(f"/api/v1/projects/{project['id']}").json()
    assert body['collected_amount'] == 0
    assert body['donor_count'] == 0


def test_several_donations_accumulate(client, make_project):
    project = make_project()
    for amount in (1_000, 2_500, 700):
        checkout = donate(client, amount, project_id=project['id'])
        assert confirm(client, checkout['donation']['id']).status_code == 200

    body = client.get(f"/api/v1/projects/{project['id']}").json()
    assert body['collected_amount'] == 4_200
    assert body['donor_count'] == 3


def test_campaign_donation_only_moves_campaign_amount(client):
    resp = client.post('/api/v1/campaigns', json={
        "slug": "ramadan",
        "goal_amount": 1_000_000,
        "start_date": "2026-03-01T00:00:00",
        "end_date": "2026-03-30T00:00:00",
        "translations": [{"language": "FR", "title": "Ramadan", "description": "Campagne"}],
    })
    campaign = resp.json()
    checkout = donate(client, 20_000, campaign_id=campaign['id'])
    assert confirm(client, checkout['donation']['id']).status_code == 200

    body = client.get(f"/api/v1/campaigns/{campaign['id']}").json()
    assert body['collected_amount'] == 20_000
    assert 'donor_count' not in body


def test_general_fund_donation_confirms(client):
    checkout = donate(client, 1_000)
    assert checkout['donation']['project_id'] is None
    assert checkout['donation']['campaign_id'] is None
    assert confirm(client, checkout['donation']['id']).status_code == 200


def test_donation_to_missing_target_is_404(client):
    resp = client.post('/api/v1/donations', json={"amount": 1_000, "payment_method": "WAVE", "project_id": 999})
    assert resp.status_code == 404
    resp = client.post('/api/v1/donations', json={"amount": 1_000, "payment_method": "WAVE", "campaign_id": 999})
    assert resp.status_code == 404


def test_donation_validation(client, make_project):
    project = make_project()
    too_small = client.post('/api/v1/donations', json={"amount": 50, "payment_method": "WAVE"})
    assert too_small.status_code == 422
    unknown_method = client.post('/api/v1/donations', json={"amount": 500, "payment_method": "BITCOIN"})
    assert unknown_method.status_code == 422
    both = client.post('/api/v1/donations', json={
        "amount": 500, "payment_method": "WAVE", "project_id": project['id'], "campaign_id": 1,
    })
    assert both.status_code == 422


def test_confirm_unknown_donation_is_404(client):
    assert confirm(client, 12345).status_code == 404


def test_payment_data_and_transaction_pairing(client):
    checkout = donate(client, 5_000, donor_name='Awa', donor_email='awa@example.org')
    donation = checkout['donation']
    payment = checkout['payment_data']
    tx = donation['transaction']

    assert re.fullmatch(r'DON-\d{13}-[0-9A-F]{8}', tx['external_id'])
    assert tx['status'] == 'PENDING'
    assert tx['amount'] == 5_000
    assert tx['payment_method'] == 'WAVE'
    assert donation['currency'] == settings.DEFAULT_CURRENCY
    assert payment['reference'] == tx['external_id']
    assert payment['checkout_url'].endswith('/' + tx['external_id'])
    assert payment['amount'] == 5_000

    created = datetime.datetime.fromisoformat(tx['created_at'])
    expires = datetime.datetime.fromisoformat(payment['expires_at'])
    assert datetime.timedelta(minutes=29) < expires - created <= datetime.timedelta(minutes=31)


def test_public_list_shows_confirmed_only_and_masks_anonymous(client, make_project):
    project = make_project()
    shown = donate(client, 1_000, project_id=project['id'], donor_name='Moussa', is_anonymous=True)
    donate(client, 2_000, project_id=project['id'], donor_name='Pending')
    confirm(client, shown['donation']['id'])

    body = client.get('/api/v1/donations', params={'project_id': project['id']}).json()
    assert body['meta']['total'] == 1
    assert body['data'][0]['donor_name'] == 'Anonyme'
    assert 'donor_email' not in body['data'][0]

    detail = client.get(f"/api/v1/projects/{project['id']}").json()
    assert [d['id'] for d in detail['recent_donations']] == [shown['donation']['id']]


def test_donation_stats(client):
    a = donate(client, 1_000, donor_email='a@example.org')
    b = donate(client, 3_000, donor_email='a@example.org')
    c = donate(client, 500, donor_name='Fatou')
    donate(client, 9_999)
    for checkout in (a, b, c):
        confirm(client, checkout['donation']['id'])

    stats = client.get('/api/v1/donations/stats').json()
    assert stats['total_donations'] == 3
    assert stats['total_amount'] == 4_500
    assert stats['unique_donors'] == 1
    assert len(stats['recent_donations']) == 3


def test_confirm_payment_service(db):
    provider = PlaceholderCheckout(base_url='https://pay.test/checkout/', expiry_minutes=5)
    result = fundraising.create_donation(
        db, donation_schemas.DonationCreate(amount=2_000, payment_method=PaymentMethod.CARD), provider,
    )
    donation = result['donation']
    assert result['payment_data'].checkout_url.startswith('https://pay.test/checkout/DON-')

    confirmed = fundraising.confirm_payment(db, donation.id, 'CARD-42')
    assert confirmed.transaction.status == TransactionStatus.SUCCESS

    with pytest.raises(Conflict):
        fundraising.confirm_payment(db, donation.id, 'CARD-43')
    with pytest.raises(NotFound):
        fundraising.confirm_payment(db, 999, 'CARD-44')


def test_lost_race_is_conflict_and_rolls_back(db, make_project, client, monkeypatch):
    project = make_project()
    checkout = donate(client, 4_000, project_id=project['id'])
    donation_id = checkout['donation']['id']

    # another worker flips the row between our read and our update
    real_get = fundraising.get_donation

    def get_then_race(session, did):
        donation = real_get(session, did)
        if donation.transaction.status == TransactionStatus.PENDING:
            session.query(Transaction).filter(Transaction.donation_id == did).update(
                {Transaction.status: TransactionStatus.SUCCESS}, synchronize_session=False
            )
        return donation

    monkeypatch.setattr(fundraising, 'get_donation', get_then_race)
    with pytest.raises(Conflict):
        fundraising.confirm_payment(db, donation_id, 'LATE')
    monkeypatch.undo()

    db.expire_all()
    assert db.get(Donation, donation_id).transaction.provider_ref is None
    body = client.get(f"/api/v1/projects/{project['id']}").json()
    assert body['collected_amount'] == 0
    assert body['donor_count'] == 0


def test_confirm_requires_admin_key_when_configured(client, monkeypatch):
    checkout = donate(client, 1_000)
    monkeypatch.setattr(settings, 'ADMIN_API_KEY', 'secretkey')

    assert confirm(client, checkout['donation']['id']).status_code == 401
    resp = confirm(client, checkout['donation']['id'], headers={'X-API-KEY': 'secretkey'})
    assert resp.status_code == 200


def test_payment_provider_is_abstract():
    with pytest.raises(TypeError):
        PaymentProvider()

    class Incomplete(PaymentProvider):
        pass

    with pytest.raises(TypeError):
        Incomplete()


def test_donation_for_unknown_user_is_404(client):
    resp = client.post('/api/v1/donations', json={"amount": 1_000, "payment_method": "WAVE", "user_id": 7})
    assert resp.status_code == 404
