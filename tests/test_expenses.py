"""
Colivin - House Expense Tests

Fixed and floating expenses, the cent-exact split, payments and the
per-member listing.
"""

import pytest
from datetime import timedelta
from decimal import Decimal
from colivin.models import HouseExpense, MemberPoints
from colivin.utils import expense_utils
from colivin.utils.error_handlers import ActionError
from colivin.utils.expense_utils import split_amount


class TestSplitAmount:

    def test_even_split(self):
        assert split_amount(Decimal('30.00'), 3) == [Decimal('10.00')] * 3

    def test_leftover_cents_go_to_leading_shares(self):
        assert split_amount(Decimal('10.00'), 3) == [Decimal('3.34'), Decimal('3.33'), Decimal('3.33')]
        assert split_amount(Decimal('0.05'), 4) == [Decimal('0.02'), Decimal('0.01'), Decimal('0.01'), Decimal('0.01')]

    @pytest.mark.parametrize('total,parts', [('100.00', 7), ('0.01', 3), ('99999.99', 11), ('12.34', 1)])
    def test_shares_sum_to_total(self, total, parts):
        shares = split_amount(Decimal(total), parts)
        assert len(shares) == parts
        assert sum(shares) == Decimal(total)
        assert max(shares) - min(shares) <= Decimal('0.01')

    def test_invalid_parts(self):
        with pytest.raises(ValueError):
            split_amount(Decimal('10'), 0)


class TestHouseExpenses:

    def test_floating_expense_splits_between_members(self, db_session, house, alice, bob):
        expense = expense_utils.create_house_expense(house, alice, 'Electricity', '100.01')
        assert expense.expense_type == 'floating'
        owed = {p.user_id: p.amount_owed for p in expense.payments}
        assert owed == {alice.id: Decimal('50.01'), bob.id: Decimal('50.00')}

    def test_fixed_expense_only_for_creator(self, db_session, house, alice):
        expense = expense_utils.create_house_expense(house, alice, 'Gym', 30, expense_type='fixed')
        assert [(p.user_id, p.amount_owed) for p in expense.payments] == [(alice.id, Decimal('30.00'))]

    def test_validation(self, db_session, house, alice):
        with pytest.raises(ActionError) as exc:
            expense_utils.create_house_expense(house, alice, 'Water', '0')
        assert exc.value.message == 'Please enter a valid amount greater than 0.'

        with pytest.raises(ActionError):
            expense_utils.create_house_expense(house, alice, 'Water', 10, expense_type='weekly')

        with pytest.raises(ActionError):
            expense_utils.create_house_expense(house, alice, 'Water', 10, recurrence_days=0)

    def test_recurring_expense_next_due_date(self, db_session, house, alice):
        expense = expense_utils.create_house_expense(house, alice, 'Rent', 900, recurrence_days=30)
        assert expense.next_due_date == expense.created_at + timedelta(days=30)

    def test_edit_floating_resplits_existing_payments(self, db_session, house, alice, bob, carol):
        expense = expense_utils.create_house_expense(house, alice, 'Internet', 40)
        # Members joining later are not added to existing expenses
        from colivin.utils.house_utils import join_house_by_invite_code
        join_house_by_invite_code(house.invite_code, carol)

        expense_utils.update_house_expense(house, alice, expense.id, title='Fibre', amount='45.01')
        db_session.expire_all()
        expense = db_session.get(HouseExpense, expense.id)
        assert expense.title == 'Fibre'
        assert sorted(p.amount_owed for p in expense.payments) == [Decimal('22.50'), Decimal('22.51')]

    def test_edit_fixed_updates_every_payment(self, db_session, house, alice):
        expense = expense_utils.create_house_expense(house, alice, 'Gym', 30, expense_type='fixed')
        expense_utils.update_house_expense(house, alice, expense.id, amount=35)
        assert [p.amount_owed for p in expense.payments] == [Decimal('35.00')]

    def test_only_creator_edits_or_deletes(self, db_session, house, alice, bob):
        expense = expense_utils.create_house_expense(house, alice, 'Internet', 40)
        with pytest.raises(ActionError) as exc:
            expense_utils.update_house_expense(house, bob, expense.id, amount=10)
        assert exc.value.status_code == 403
        with pytest.raises(ActionError) as exc:
            expense_utils.delete_house_expense(house, bob, expense.id)
        assert exc.value.status_code == 403

    def test_delete_cascades(self, db_session, house, alice):
        expense = expense_utils.create_house_expense(house, alice, 'Internet', 40)
        expense_id = expense.id
        expense_utils.delete_house_expense(house, alice, expense_id)
        assert db_session.get(HouseExpense, expense_id) is None

    def test_pay_awards_points_once(self, db_session, house, alice, bob):
        expense = expense_utils.create_house_expense(house, alice, 'Internet', 40)
        payment = expense_utils.pay_house_expense(house, bob, expense.id)
        assert payment.is_paid is True
        assert payment.paid_at is not None
        assert MemberPoints.points_by_user(house.id) == {bob.id: 5}

        with pytest.raises(ActionError) as exc:
            expense_utils.pay_house_expense(house, bob, expense.id)
        assert exc.value.status_code == 409
        assert MemberPoints.points_by_user(house.id) == {bob.id: 5}

    def test_pay_without_share(self, db_session, house, alice, bob):
        expense = expense_utils.create_house_expense(house, alice, 'Gym', 30, expense_type='fixed')
        with pytest.raises(ActionError) as exc:
            expense_utils.pay_house_expense(house, bob, expense.id)
        assert exc.value.status_code == 404

    def test_listing_filters(self, db_session, house, alice, bob):
        expense_utils.create_house_expense(house, alice, 'Gym', 30, expense_type='fixed')
        settled = expense_utils.create_house_expense(house, alice, 'Water', 20)
        expense_utils.create_house_expense(house, alice, 'Power', 60)

        expense_utils.pay_house_expense(house, alice, settled.id)
        expense_utils.pay_house_expense(house, bob, settled.id)

        for_bob = expense_utils.list_house_expenses(house, bob)
        assert for_bob['fixed'] == []
        assert [e['title'] for e in for_bob['floating']] == ['Power']

        for_alice = expense_utils.list_house_expenses(house, alice)
        assert [e['title'] for e in for_alice['fixed']] == ['Gym']
        power = for_alice['floating'][0]
        assert power['paid_count'] == 0
        assert power['total_members'] == 2
        assert power['my_payment']['amount_owed'] == 30.0


class TestExpenseRoutes:

    def test_create_list_pay(self, db_session, login_client, house_url, alice, bob):
        alice_client = login_client(alice)
        resp = alice_client.post(f'{house_url}/expenses', json={'title': 'Gas', 'amount': 25.5})
        assert resp.status_code == 201
        expense_id = resp.get_json()['expense']['id']
        assert len(resp.get_json()['payments']) == 2

        bob_client = login_client(bob)
        listing = bob_client.get(f'{house_url}/expenses').get_json()
        assert listing['floating'][0]['my_payment']['amount_owed'] == 12.75

        resp = bob_client.post(f'{house_url}/expenses/{expense_id}/pay')
        assert resp.status_code == 200
        assert bob_client.post(f'{house_url}/expenses/{expense_id}/pay').status_code == 409

    def test_invalid_amount_route(self, db_session, login_client, house_url, alice):
        resp = login_client(alice).post(f'{house_url}/expenses', json={'title': 'Gas', 'amount': 'abc'})
        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'Please enter a valid amount greater than 0.'

    def test_huge_amount_route(self, db_session, login_client, house_url, alice):
        resp = login_client(alice).post(f'{house_url}/expenses', json={'title': 'Gas', 'amount': '1e30'})
        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'Amount is too large.'

    def test_edit_and_delete_routes(self, db_session, login_client, house_url, alice, bob):
        alice_client = login_client(alice)
        expense_id = alice_client.post(f'{house_url}/expenses', json={'title': 'Gas', 'amount': 20}).get_json()['expense']['id']

        assert login_client(bob).patch(f'{house_url}/expenses/{expense_id}', json={'amount': 5}).status_code == 403

        resp = alice_client.patch(f'{house_url}/expenses/{expense_id}', json={'amount': 30})
        assert resp.status_code == 200
        assert [p['amount_owed'] for p in resp.get_json()['payments']] == [15.0, 15.0]

        assert alice_client.delete(f'{house_url}/expenses/{expense_id}').status_code == 200
        assert alice_client.delete(f'{house_url}/expenses/{expense_id}').status_code == 404
