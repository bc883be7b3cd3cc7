import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from brixxo.requirements.wizard import (
    AttachmentManager,
    PendingFile,
    RequirementForm,
    StepController,
    SubmissionNotReady,
)


def test_next_and_prev_stay_within_bounds():
    for start in range(1, 5):
        wizard = StepController(RequirementForm(service_type='renovation'), start)
        assert wizard.next_step() == min(start + 1, 4)
        wizard = StepController(RequirementForm(service_type='renovation'), start)
        assert wizard.prev_step() == max(start - 1, 1)


def test_step_one_gated_on_service_type():
    wizard = StepController(RequirementForm())
    assert not wizard.can_advance()
    assert wizard.next_step() == 1
    wizard.form.select_service('architecture')
    assert wizard.next_step() == 2


def test_details_and_attachments_steps_not_gated():
    # empty title/description/location still reach the review step
    wizard = StepController(RequirementForm(service_type='construction'), 2)
    assert wizard.next_step() == 3
    assert wizard.next_step() == 4
    assert wizard.form.review()['missing'] == ['title', 'description', 'location']


def test_unknown_service_type_rejected():
    form = RequirementForm()
    with pytest.raises(ValueError):
        form.select_service('plumbing')
    assert form.service_type == ''


def test_remove_first_attachment_keeps_second():
    a = PendingFile('a.png', 'image/png', 10)
    b = PendingFile('b.png', 'image/png', 20)
    mgr = AttachmentManager()
    mgr.add_files([a, b])
    mgr.remove_file(0)
    assert mgr.files == [b]


def test_attachments_not_deduplicated():
    mgr = AttachmentManager()
    mgr.add_files([PendingFile('plan.pdf'), PendingFile('plan.pdf')])
    assert len(mgr) == 2
    with pytest.raises(IndexError):
        mgr.remove_file(2)


def test_submit_only_from_review_step():
    class Submitter:
        calls = 0

        def submit(self, form):
            Submitter.calls += 1
            return 'sent'

    wizard = StepController(RequirementForm(service_type='renovation'), 3)
    with pytest.raises(SubmissionNotReady):
        wizard.submit(Submitter())
    assert Submitter.calls == 0
    wizard.next_step()
    assert wizard.submit(Submitter()) == 'sent'


def test_field_updates_from_wire_names():
    form = RequirementForm()
    form.update({
        'serviceType': 'interior-design',
        'title': 'Living room',
        'timeline': {'startDate': '2026-11-01'},
        'timeline.endDate': '2027-01-31',
        'budget': 'not a number',
        'requestMultipleQuotes': 'false',
        'priority': 'high',
    })
    assert form.service_type == 'interior-design'
    assert form.timeline == {'startDate': '2026-11-01', 'endDate': '2027-01-31'}
    assert form.budget == 50000
    assert form.request_multiple_quotes is False
    assert form.priority == 'high'


def test_budget_review_uses_grouped_rupees():
    form = RequirementForm()
    assert form.budget == 100000
    form.set_field('budget', '5000000')
    assert form.review()['budgetDisplay'] == '₹5,000,000'


def test_progress_marks_done_and_next():
    wizard = StepController(RequirementForm(service_type='renovation'), 2)
    states = [p['state'] for p in wizard.progress()]
    assert states == ['done', 'done', 'next', 'todo']
    assert wizard.title == 'Project Details'
