from budget_planner.lib.budget.models import ExpenseType
from budget_planner.lib.budget.wizard import (
    WIZARD_CUSTOM_NOTE,
    WIZARD_NOTE,
    ExpenseWizard,
    checklist_items,
)

ITEMS = [
    {'name': 'Car Installment', 'description': 'Monthly car payment'},
    {'name': 'Restaurants & Cafes', 'description': 'Eating out'},
]


def test_checklist_items_per_language():
    assert len(checklist_items('en')) == len(checklist_items('ar')) > 0
    assert checklist_items('xx') == []


def test_yes_then_amount_records_categorized_draft():
    wizard = ExpenseWizard('en', items=ITEMS)
    wizard.answer(True)
    assert wizard.awaiting_amount

    assert wizard.confirm_amount(1200)
    draft = wizard.collected[0]
    assert draft.name == 'Car Installment'
    assert draft.category == ExpenseType.NEED
    assert draft.note == WIZARD_NOTE
    assert wizard.current_item['name'] == 'Restaurants & Cafes'
    assert wizard.progress == 50.0


def test_invalid_amount_keeps_question_open():
    wizard = ExpenseWizard('en', items=ITEMS)
    wizard.answer(True)
    assert not wizard.confirm_amount(0)
    assert not wizard.confirm_amount(None)
    assert wizard.awaiting_amount
    assert wizard.collected == []


def test_no_skips_and_last_item_opens_custom_phase():
    wizard = ExpenseWizard('en', items=ITEMS)
    wizard.answer(False)
    wizard.answer(True)
    wizard.confirm_amount(300)

    assert wizard.custom_phase
    assert wizard.current_item is None
    assert wizard.progress == 100.0
    assert wizard.collected[0].category == ExpenseType.WANT


def test_cancel_amount_returns_to_question():
    wizard = ExpenseWizard('en', items=ITEMS)
    wizard.answer(True)
    wizard.cancel_amount()
    assert not wizard.awaiting_amount
    assert wizard.current_item['name'] == 'Car Installment'


def test_custom_expenses_only_in_custom_phase():
    wizard = ExpenseWizard('en', items=ITEMS)
    assert not wizard.add_custom('Gym', 150)

    wizard.answer(False)
    wizard.answer(False)
    assert wizard.add_custom(' Gym ', 150)
    assert not wizard.add_custom('', 150)

    drafts = wizard.finish()
    assert [(d.name, d.category, d.note) for d in drafts] == [('Gym', ExpenseType.WANT, WIZARD_CUSTOM_NOTE)]
    assert wizard.total == 150
