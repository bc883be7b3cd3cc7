import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from brixxo import create_app
from brixxo.api import marketplace
from brixxo.errors import NotFound, ValidationFailed
from brixxo.quotes.comparison import compare_quotes
from brixxo.quotes.forms import QuoteForm, parse_number

PRO = {'_id': 'p1', 'role': 'professional'}


def setup_app(monkeypatch, user=PRO):
    app = create_app('testing')
    monkeypatch.setattr(marketplace, 'get_profile', lambda client: user)
    client = app.test_client()
    with client.session_transaction() as sess:
        sess['token'] = 'tok'
    return app, client


def test_parse_number_reads_leading_digits():
    assert parse_number('12.5 lakh') == 12.5
    assert parse_number('abc') is None
    assert parse_number('') is None
    assert parse_number(7) == 7.0


def test_default_milestones_total_hundred():
    form = QuoteForm()
    assert [m.name for m in form.milestones] == ['Foundation', 'Structure', 'Finishing', 'Handover']
    assert form.milestone_total() == 100


def test_payload_drops_unnamed_milestones_and_zero_fills():
    form = QuoteForm(design_proposal='Open plan', estimated_budget='1500000')
    form.budget_breakdown['materials'] = '600000'
    form.budget_breakdown['labor'] = 'n/a'
    form.add_milestone()
    form.update_milestone(0, 'percentage', '25')
    form.remove_milestone(3)
    payload = form.to_payload('req-1')

    assert payload['requirement'] == 'req-1'
    assert payload['estimatedBudget'] == 1500000.0
    assert payload['budgetBreakdown']['materials'] == 600000.0
    assert payload['budgetBreakdown']['labor'] == 0
    assert set(payload['budgetBreakdown']) == {
        'materials', 'labor', 'equipment', 'permits', 'overhead', 'profit', 'other'
    }
    milestones = payload['timeline']['milestones']
    assert [m['name'] for m in milestones] == ['Foundation', 'Structure', 'Finishing']
    assert milestones[0]['percentage'] == 25.0


def test_form_defaults_timeline_from_requirement():
    form = QuoteForm.for_requirement({
        'timeline': {'startDate': '2026-11-01T00:00:00.000Z', 'endDate': '2027-03-01T00:00:00.000Z'}
    })
    assert (form.start_date, form.end_date) == ('2026-11-01', '2027-03-01')


def test_compare_sorts_by_each_key():
    quotes = [
        {'_id': 'a', 'estimatedBudget': 900000, 'company': {'rating': 4.1},
         'timeline': {'startDate': '2026-01-01', 'endDate': '2026-03-01'}},
        {'_id': 'b', 'estimatedBudget': 400000, 'company': {'rating': 4.8},
         'timeline': {'startDate': '2026-01-01', 'endDate': '2026-06-01'}},
        {'_id': 'c', 'estimatedBudget': 12000000, 'company': {'rating': 3.9},
         'timeline': {'startDate': '2026-01-01', 'endDate': '2026-01-15'}},
    ]
    assert [q['_id'] for q in compare_quotes(quotes, 'budget')] == ['b', 'a', 'c']
    assert [q['_id'] for q in compare_quotes(quotes, 'timeline')] == ['c', 'a', 'b']
    assert [q['_id'] for q in compare_quotes(quotes, 'rating')] == ['b', 'a', 'c']
    by_budget = compare_quotes(quotes, 'budget')
    assert by_budget[0]['budgetDisplay'] == '₹4.0L'
    assert by_budget[2]['budgetDisplay'] == '₹1.2Cr'
    assert by_budget[2]['timelineDays'] == 14


def test_quote_form_route_seeds_timeline(monkeypatch):
    app, client = setup_app(monkeypatch)
    monkeypatch.setattr(marketplace, 'get_public_requirement', lambda c, rid: {
        '_id': rid, 'budget': 300000,
        'timeline': {'startDate': '2026-12-01T00:00:00Z', 'endDate': '2027-01-01T00:00:00Z'},
    })
    resp = client.get('/quotes/submit/r1')
    body = resp.get_json()
    assert resp.status_code == 200
    assert body['form']['timeline'] == {'startDate': '2026-12-01', 'endDate': '2027-01-01'}
    assert body['budgetDisplay'] == '₹3.0L'
    assert body['milestoneTotal'] == 100


def test_missing_requirement_redirects_to_quotes(monkeypatch):
    app, client = setup_app(monkeypatch)

    def fake_get(c, rid):
        raise NotFound('gone', status=404)

    monkeypatch.setattr(marketplace, 'get_public_requirement', fake_get)
    resp = client.get('/quotes/submit/r404')
    assert resp.status_code == 404
    assert resp.get_json()['redirect'] == '/dashboard/quotes'


def test_submit_quote_failure_uses_server_message(monkeypatch):
    app, client = setup_app(monkeypatch)

    def fake_submit(c, payload):
        raise ValidationFailed('Already quoted', status=400, body_message='Already quoted')

    monkeypatch.setattr(marketplace, 'submit_quote', fake_submit)
    resp = client.post('/quotes/submit/r1', json={'designProposal': 'x', 'estimatedBudget': '100'})
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Already quoted'


def test_submit_quote_success(monkeypatch):
    app, client = setup_app(monkeypatch)
    sent = {}
    monkeypatch.setattr(marketplace, 'submit_quote', lambda c, payload: sent.update(payload) or {'_id': 'q1'})
    resp = client.post('/quotes/submit/r1', json={
        'designProposal': 'Modern', 'estimatedBudget': '250000',
        'timeline': {'startDate': '2026-12-01', 'endDate': '2027-02-01'},
    })
    assert resp.status_code == 201
    assert sent['requirement'] == 'r1'
    assert len(sent['timeline']['milestones']) == 4


def test_homeowner_selects_quote(monkeypatch):
    app, client = setup_app(monkeypatch, user={'_id': 'h1', 'role': 'homeowner'})
    chosen = []
    monkeypatch.setattr(marketplace, 'select_quote', lambda c, rid, qid: chosen.append((rid, qid)) or {})
    resp = client.post('/requirements/r1/select-quote', json={'quoteId': 'q7'})
    assert resp.status_code == 200
    assert chosen == [('r1', 'q7')]


def test_milestone_route_applies_one_edit(monkeypatch):
    app, client = setup_app(monkeypatch)
    form = QuoteForm().to_dict()

    resp = client.post('/quotes/submit/r1/milestones', json={'form': form, 'action': 'remove', 'index': 3})
    body = resp.get_json()
    assert resp.status_code == 200
    assert [m['name'] for m in body['form']['milestones']] == ['Foundation', 'Structure', 'Finishing']
    assert body['milestoneTotal'] == 90

    resp = client.post('/quotes/submit/r1/milestones', json={
        'form': body['form'], 'action': 'update', 'index': 2, 'field': 'percentage', 'value': '40',
    })
    assert resp.get_json()['milestoneTotal'] == 100

    resp = client.post('/quotes/submit/r1/milestones', json={'form': body['form'], 'action': 'add'})
    assert len(resp.get_json()['form']['milestones']) == 4


def test_milestone_route_rejects_bad_edits(monkeypatch):
    app, client = setup_app(monkeypatch)
    form = QuoteForm().to_dict()
    for edit in (
        {'action': 'remove', 'index': 9},
        {'action': 'update', 'index': 0, 'field': 'colour', 'value': 'red'},
        {'action': 'update', 'field': 'name', 'value': 'x'},
        {'action': 'rename'},
    ):
        resp = client.post('/quotes/submit/r1/milestones', json=dict(edit, form=form))
        assert resp.status_code == 400
