"""
Colivin - Shared Expense Tests

A member pays for something the whole house uses; every other member owes
the creator a share until they confirm the payment.
"""

import pytest
from decimal import Decimal
from colivin.models import MemberPoints, SharedExpense
from colivin.utils import expense_utils
from colivin.utils.error_handlers import ActionError
from colivin.utils.house_utils import create_house, join_house_by_invite_code, leave_house


@pytest.fixture
def big_house(house, carol):
    """alice (creator), bob and carol"""
    join_house_by_invite_code(house.invite_code, carol)
    return house


class TestSharedExpenses:

    def test_requires_other_members(self, db_session, alice):
        solo = create_house('Solo', alice)
        with pytest.raises(ActionError) as exc:
            expense_utils.create_shared_expense(solo, alice, 'Pizza', 20)
        assert exc.value.message == 'There are no other members in the house to split the expense with.'

    def test_creator_keeps_first_share(self, db_session, big_house, alice, bob, carol):
        expense = expense_utils.create_shared_expense(big_house, alice, 'Groceries', '10.00')
        owed = {p.user_id: p.amount_owed for p in expense.payments}
        assert owed == {bob.id: Decimal('3.33'), carol.id: Decimal('3.33')}
        assert alice.id not in owed

    def test_edit_recalculates_over_current_members(self, db_session, house, alice, bob, carol):
        expense = expense_utils.create_shared_expense(house, alice, 'Pizza', 20)
        assert [p.amount_owed for p in expense.payments] == [Decimal('10.00')]

        join_house_by_invite_code(house.invite_code, carol)
        expense_utils.update_shared_expense(house, alice, expense.id, total_amount=30)

        db_session.expire_all()
        expense = db_session.get(SharedExpense, expense.id)
        assert expense.total_amount == Decimal('30.00')
        assert [p.amount_owed for p in expense.payments] == [Decimal('10.00')]

    def test_edit_after_a_debtor_left(self, db_session, big_house, alice, bob, carol):
        expense = expense_utils.create_shared_expense(big_house, alice, 'Internet', 30)
        leave_house(big_house, carol)

        expense_utils.update_shared_expense(big_house, alice, expense.id, total_amount='25.01')

        db_session.expire_all()
        expense = db_session.get(SharedExpense, expense.id)
        owed = {p.user_id: p.amount_owed for p in expense.payments}
        assert owed == {bob.id: Decimal('12.50'), carol.id: Decimal('12.50')}

    def test_only_creator_edits_and_deletes(self, db_session, house, alice, bob):
        expense = expense_utils.create_shared_expense(house, alice, 'Pizza', 20)
        with pytest.raises(ActionError) as exc:
            expense_utils.update_shared_expense(house, bob, expense.id, title='Mine')
        assert exc.value.status_code == 403
        with pytest.raises(ActionError) as exc:
            expense_utils.delete_shared_expense(house, bob, expense.id)
        assert exc.value.status_code == 403

    def test_only_debtor_pays(self, db_session, big_house, alice, bob, carol):
        expense = expense_utils.create_shared_expense(big_house, alice, 'Groceries', 30)
        bob_payment = next(p for p in expense.payments if p.user_id == bob.id)

        with pytest.raises(ActionError) as exc:
            expense_utils.pay_shared_expense(big_house, carol, bob_payment.id)
        assert exc.value.status_code == 403

        expense_utils.pay_shared_expense(big_house, bob, bob_payment.id)
        assert MemberPoints.points_by_user(big_house.id) == {bob.id: 5}

        with pytest.raises(ActionError) as exc:
            expense_utils.pay_shared_expense(big_house, bob, bob_payment.id)
        assert exc.value.status_code == 409

    def test_debts_and_credits(self, db_session, big_house, alice, bob, carol):
        expense = expense_utils.create_shared_expense(big_house, alice, 'Groceries', 30)

        debts = expense_utils.get_my_debts(big_house, bob)
        assert len(debts) == 1
        assert debts[0]['creditor'] == alice.display_name
        assert debts[0]['total_amount'] == 30.0
        assert debts[0]['amount_owed'] == 10.0

        credits = expense_utils.get_credits_owed(big_house, alice)
        assert credits[0]['outstanding'] == 20.0
        assert {p['debtor'] for p in credits[0]['payments']} == {bob.display_name, carol.display_name}

        for payment in list(expense.payments):
            expense_utils.pay_shared_expense(big_house, payment.debtor, payment.id)

        assert expense_utils.get_my_debts(big_house, bob) == []
        assert expense_utils.get_credits_owed(big_house, alice) == []


class TestSharedExpenseRoutes:

    def test_flow(self, db_session, login_client, house_url, alice, bob):
        alice_client = login_client(alice)
        resp = alice_client.post(f'{house_url}/shared-expenses', json={'title': 'Cleaning kit', 'total_amount': 12})
        assert resp.status_code == 201
        payment_id = resp.get_json()['payments'][0]['id']

        bob_client = login_client(bob)
        ledger = bob_client.get(f'{house_url}/shared-expenses').get_json()
        assert ledger['debts'][0]['amount_owed'] == 6.0
        assert ledger['credits'] == []

        assert alice_client.post(f'{house_url}/shared-expenses/payments/{payment_id}/pay').status_code == 403
        assert bob_client.post(f'{house_url}/shared-expenses/payments/{payment_id}/pay').status_code == 200
        assert bob_client.get(f'{house_url}/shared-expenses').get_json()['debts'] == []

    def test_edit_and_delete(self, db_session, login_client, house_url, alice):
        alice_client = login_client(alice)
        expense_id = alice_client.post(
            f'{house_url}/shared-expenses', json={'title': 'Soap', 'total_amount': 8}
        ).get_json()['expense']['id']

        resp = alice_client.patch(f'{house_url}/shared-expenses/{expense_id}', json={'total_amount': 10})
        assert resp.status_code == 200
        assert resp.get_json()['payments'][0]['amount_owed'] == 5.0

        assert alice_client.delete(f'{house_url}/shared-expenses/{expense_id}').status_code == 200

    def test_solo_house_route(self, db_session, login_client, alice):
        alice_client = login_client(alice)
        house_id = alice_client.post('/api/houses', json={'name': 'Solo'}).get_json()['house']['id']
        resp = alice_client.post(f'/api/houses/{house_id}/shared-expenses', json={'title': 'x', 'total_amount': 5})
        assert resp.status_code == 400
