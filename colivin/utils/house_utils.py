"""
House Utilities

FLOW OVERVIEW
- generate_unique_invite_code()
  • Random 8-character code, retried until unused (10 attempts).
- create_house(name, user) / join_house_by_invite_code(code, user)
  • The creator becomes the first member; joining is case-insensitive.
- leave_house / remove_member / promote_member
  • Only this house's membership is touched. The creator must hand over the
    house before leaving while other members remain; a lone creator leaving
    deletes the house.
- send_house_invite(house, sender, email)
  • Emails the invite code through Flask-Mail.
- build_dashboard(house, user)
  • Summary shown on the house home screen.
"""

import logging
from datetime import datetime
from decimal import Decimal

from flask_mail import Message

from ..models import db, House, HouseMember, HouseTask
from ..models.utils import generate_invite_code, format_money
from .error_handlers import ActionError
from .expense_utils import outstanding_house_expenses, get_my_debts, get_credits_owed
from .points_utils import get_leaderboard
from .prom_metrics import observe_action
from .validators import validate_text, validate_invite_code, validate_email

logger = logging.getLogger(__name__)

INVITE_CODE_ATTEMPTS = 10
LEADERBOARD_PREVIEW_SIZE = 3


def generate_unique_invite_code(attempts=INVITE_CODE_ATTEMPTS):
    """Invite code not used by any house"""
    for _ in range(attempts):
        code = generate_invite_code()
        if not House.invite_code_exists(code):
            return code
    raise ActionError('Could not generate a unique invite code. Please try again.', 500)


def create_house(name, user):
    """Create a house with `user` as creator and first member"""
    result = validate_text(name, 'House name', max_length=100)
    if not result.is_valid:
        raise ActionError(result.error_message)

    house = House(name=result.sanitized_value, invite_code=generate_unique_invite_code(), created_by=user.id)
    db.session.add(house)
    db.session.flush()

    db.session.add(HouseMember(house_id=house.id, user_id=user.id))
    db.session.commit()

    observe_action('house_created')
    logger.info(f"House {house.id} created by {user.display_name}")
    return house


def join_house_by_invite_code(invite_code, user):
    """Add `user` to the house behind an invite code"""
    result = validate_invite_code(invite_code)
    if not result.is_valid:
        raise ActionError(result.error_message)

    house = House.find_by_invite_code(result.sanitized_value)
    if house is None:
        raise ActionError.not_found('Invalid invite code. No house found.')

    if house.is_member(user):
        raise ActionError.conflict('You are already a member of this house.')

    db.session.add(HouseMember(house_id=house.id, user_id=user.id))
    db.session.commit()

    observe_action('house_joined')
    logger.info(f"{user.display_name} joined house {house.id}")
    return house


def get_user_houses(user):
    """Houses of a user, newest first"""
    return House.get_user_houses(user.id)


def get_house_members(house):
    """Members ordered by join time"""
    return [membership.to_dict() for membership in house.ordered_members()]


def leave_house(house, user):
    """Remove the caller's membership; returns True when the house was deleted"""
    membership = house.get_membership(user)
    if membership is None:
        raise ActionError.forbidden('You are not a member of this house')

    if house.is_creator(user):
        if house.member_count() > 1:
            raise ActionError.conflict(
                'The house creator cannot leave while other members remain. '
                'Promote another member first.'
            )
        db.session.delete(house)
        db.session.commit()

        observe_action('house_left')
        logger.info(f"House {house.id} deleted after its last member {user.display_name} left")
        return True

    db.session.delete(membership)
    db.session.commit()

    observe_action('house_left')
    logger.info(f"{user.display_name} left house {house.id}")
    return False


def _get_house_membership(house, membership_id):
    membership = HouseMember.query.filter_by(id=membership_id, house_id=house.id).first()
    if membership is None:
        raise ActionError.not_found('Member not found')
    return membership


def remove_member(house, actor, membership_id):
    """Creator removes another member"""
    if not house.is_creator(actor):
        raise ActionError.forbidden('Only the house creator can remove members.')

    membership = _get_house_membership(house, membership_id)
    if membership.user_id == house.created_by:
        raise ActionError('The house creator cannot be removed.')

    display_name = membership.user.display_name
    db.session.delete(membership)
    db.session.commit()
    logger.info(f"{display_name} removed from house {house.id} by {actor.display_name}")


def promote_member(house, actor, membership_id):
    """Creator hands ownership of the house to another member"""
    if not house.is_creator(actor):
        raise ActionError.forbidden('Only the house creator can promote members.')

    membership = _get_house_membership(house, membership_id)
    house.created_by = membership.user_id
    db.session.commit()

    logger.info(f"{membership.user.display_name} is now the creator of house {house.id}")
    return membership


def send_house_invite(house, sender, email, mail):
    """Email the invite code of `house`; returns whether the message went out"""
    result = validate_email(email)
    if not result.is_valid:
        raise ActionError(result.error_message)

    msg = Message(
        subject=f"{sender.display_name} invited you to {house.name}",
        recipients=[result.sanitized_value],
        body=(
            f"Hello!\n\n"
            f"{sender.display_name} invited you to join the house \"{house.name}\".\n\n"
            f"Use this invite code to join: {house.invite_code}\n"
        )
    )

    try:
        mail.send(msg)
    except Exception as e:
        logger.error(f"Failed to send invite for house {house.id} to {result.sanitized_value}: {e}")
        return False

    observe_action('house_invite_sent')
    logger.info(f"Invite for house {house.id} sent to {result.sanitized_value}")
    return True


def build_dashboard(house, user, now=None):
    """Everything the house home screen shows"""
    now = now or datetime.utcnow()
    active_tasks = HouseTask.get_active_tasks(house.id)

    debts = get_my_debts(house, user)
    credits = get_credits_owed(house, user)

    return {
        'house': house.to_dict(),
        'invite_code': house.invite_code,
        'is_creator': house.is_creator(user),
        'members': get_house_members(house),
        'active_tasks': len(active_tasks),
        'overdue_tasks': sum(1 for task in active_tasks if task.is_overdue(now)),
        'outstanding': {
            'house_expenses': format_money(outstanding_house_expenses(house, user)),
            'shared_debts': format_money(sum((Decimal(str(d['amount_owed'])) for d in debts), Decimal('0'))),
            'credits_owed': format_money(sum((Decimal(str(c['outstanding'])) for c in credits), Decimal('0')))
        },
        'leaderboard': get_leaderboard(house, user)[:LEADERBOARD_PREVIEW_SIZE]
    }
