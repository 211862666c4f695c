import asyncio
from datetime import datetime, timedelta

import pytest

from utils.errors import AlreadyResolved, InvalidTransition, MissingParty, NotFound, Unauthorized, ValidationError


@pytest.fixture
def pair(make_fighter):
    async def _setup(points=10):
        await make_fighter(1, 'Disputer', points=points)
        await make_fighter(2, 'Iron Mike', points=points, weight_class='Heavyweight')
    return _setup


@pytest.mark.asyncio
async def test_give_win_records_both_sides(engine, database, pair, admin_id):
    await pair()
    fight_id = await database.create_scheduled_fight(1, 2, 'Middleweight')
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', fight_id=fight_id)

    outcome = await engine.resolve_dispute(dispute['dispute_id'], admin_id, 'give_win_to_submitter', 'Win awarded')

    assert outcome['opponent_id'] == 2
    assert (await engine.get_fighter(1))['points'] == 15
    assert (await engine.get_fighter(2))['points'] == 7

    win = (await engine.get_fight_history(1))[0]
    assert win['result'] == 'Win'
    assert win['method'] == 'UD'
    assert win['round'] == 0
    assert win['points_earned'] == 5
    assert win['opponent_name'] == 'Iron Mike'
    assert win['weight_class'] == 'Middleweight'
    assert win['notes'] == 'Dispute resolution: Admin awarded win to submitter'

    loss = (await engine.get_fight_history(2))[0]
    assert loss['result'] == 'Loss'
    assert loss['points_earned'] == -3
    assert loss['opponent_name'] == 'Disputer'
    assert loss['notes'] == 'Dispute resolution: Admin awarded win to opponent'

    assert (await database.get_scheduled_fight(fight_id))['status'] == 'Completed'
    resolved = outcome['dispute']
    assert resolved['status'] == 'Resolved'
    assert resolved['resolution_type'] == 'give_win_to_submitter'
    assert resolved['resolved_by'] == admin_id
    assert resolved['resolved_at'] is not None


@pytest.mark.asyncio
async def test_give_win_uses_disputer_weight_class_without_fight(engine, pair, admin_id):
    await pair()
    dispute = await engine.open_dispute(1, 'exploits', 'Wall glitch', opponent_id=2)

    await engine.resolve_dispute(dispute['dispute_id'], admin_id, 'give_win_to_submitter', 'Win awarded')

    assert (await engine.get_fight_history(1))[0]['weight_class'] == 'Lightweight'


@pytest.mark.asyncio
async def test_give_win_can_promote_the_disputer(engine, pair, admin_id):
    await pair(points=17)
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)

    outcome = await engine.resolve_dispute(dispute['dispute_id'], admin_id, 'give_win_to_submitter', 'Win awarded')

    assert outcome['progression'][0]['new_tier'] == 'Semi-Pro'
    assert outcome['progression'][0]['transition'] == 'promotion'
    assert (await engine.get_fighter(1))['tier'] == 'Semi-Pro'


@pytest.mark.asyncio
@pytest.mark.parametrize('resolution_type, days', [
    ('one_week_suspension', 7),
    ('two_week_suspension', 14),
    ('one_month_suspension', 30),
])
async def test_timed_suspensions(engine, pair, admin_id, resolution_type, days):
    await pair()
    dispute = await engine.open_dispute(1, 'spamming', 'Spam', opponent_id=2)

    before = datetime.now().replace(microsecond=0)
    outcome = await engine.resolve_dispute(dispute['dispute_id'], admin_id, resolution_type, 'Suspended')
    after = datetime.now()

    opponent = await engine.get_fighter(2)
    banned_until = datetime.fromisoformat(opponent['banned_until'])
    assert before + timedelta(days=days) <= banned_until <= after + timedelta(days=days)
    assert opponent['banned_reason'] == f"Dispute resolution: {resolution_type.replace('_', ' ')}"
    assert outcome['suspension']['permanent'] is False
    assert await engine.is_suspended(2)
    assert not await engine.is_suspended(2, now=after + timedelta(days=days, seconds=1))
    assert not await engine.is_suspended(1)


@pytest.mark.asyncio
async def test_ban_uses_permanent_sentinel(engine, pair, admin_id):
    await pair()
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)

    outcome = await engine.resolve_dispute(dispute['dispute_id'], admin_id, 'banned_from_league', 'Banned')

    opponent = await engine.get_fighter(2)
    assert opponent['banned_until'] == '9999-12-31T23:59:59'
    assert opponent['banned_reason'] == 'Dispute resolution: Banned from league'
    assert outcome['suspension']['permanent'] is True

    notices = await engine.notifications.get_notifications(2)
    assert 'League Suspension' in {n['title'] for n in notices}


@pytest.mark.asyncio
async def test_suspension_never_shortens_a_longer_ban(engine, pair, admin_id):
    await pair()
    first = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)
    second = await engine.open_dispute(1, 'spamming', 'Spam', opponent_id=2)

    await engine.resolve_dispute(first['dispute_id'], admin_id, 'banned_from_league', 'Banned')
    outcome = await engine.resolve_dispute(second['dispute_id'], admin_id, 'one_week_suspension', 'Suspended')

    opponent = await engine.get_fighter(2)
    assert opponent['banned_until'] == '9999-12-31T23:59:59'
    assert opponent['banned_reason'] == 'Dispute resolution: Banned from league'
    assert outcome['suspension']['permanent'] is True


@pytest.mark.asyncio
async def test_second_resolution_is_rejected(engine, pair, admin_id):
    await pair()
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)
    await engine.resolve_dispute(dispute['dispute_id'], admin_id, 'give_win_to_submitter', 'Win awarded')

    with pytest.raises(AlreadyResolved) as excinfo:
        await engine.resolve_dispute(dispute['dispute_id'], admin_id, 'give_win_to_submitter', 'Again')

    assert isinstance(excinfo.value, InvalidTransition)
    assert (await engine.get_fighter(1))['points'] == 15
    assert len(await engine.get_fight_history(1)) == 1


@pytest.mark.asyncio
async def test_concurrent_resolutions_apply_once(engine, pair, admin_id):
    await pair()
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)

    results = await asyncio.gather(
        engine.resolve_dispute(dispute['dispute_id'], admin_id, 'give_win_to_submitter', 'First'),
        engine.resolve_dispute(dispute['dispute_id'], admin_id, 'give_win_to_submitter', 'Second'),
        return_exceptions=True,
    )

    successes = [r for r in results if not isinstance(r, Exception)]
    failures = [r for r in results if isinstance(r, Exception)]
    assert len(successes) == 1
    assert len(failures) == 1
    assert isinstance(failures[0], AlreadyResolved)

    assert (await engine.get_fighter(1))['points'] == 15
    assert (await engine.get_fighter(2))['points'] == 7
    assert len(await engine.get_fight_history(1)) == 1


@pytest.mark.asyncio
async def test_missing_opponent_rolls_back(engine, make_fighter, admin_id):
    await make_fighter(1, 'Disputer', points=10)
    await make_fighter(2, 'Iron Mike', points=10)
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_name='iron mike')
    assert dispute['opponent_id'] is None

    with pytest.raises(MissingParty):
        await engine.resolve_dispute(dispute['dispute_id'], admin_id, 'give_win_to_submitter', 'Win awarded')

    assert (await engine.disputes.get_dispute(dispute['dispute_id']))['status'] == 'Open'
    assert (await engine.get_fighter(1))['points'] == 10
    assert await engine.get_fight_history(1) == []

    with pytest.raises(MissingParty):
        await engine.resolve_dispute(dispute['dispute_id'], admin_id, 'one_week_suspension', 'Suspended')


@pytest.mark.asyncio
async def test_opponent_resolved_by_name_at_resolution_time(engine, make_fighter, admin_id):
    await make_fighter(1, 'Disputer', points=10)
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_name='Iron Mike')
    assert dispute['opponent_id'] is None

    await make_fighter(2, 'Iron Mike', points=10)
    outcome = await engine.resolve_dispute(dispute['dispute_id'], admin_id, 'give_win_to_submitter', 'Win awarded')

    assert outcome['opponent_id'] == 2
    assert outcome['dispute']['opponent_id'] == 2
    assert (await engine.get_fighter(2))['points'] == 7


@pytest.mark.asyncio
async def test_warning_needs_no_opponent(engine, make_fighter, admin_id):
    await make_fighter(1, 'Disputer')
    dispute = await engine.open_dispute(1, 'other', 'Rude in chat', opponent_name='Ghost')

    outcome = await engine.resolve_dispute(dispute['dispute_id'], admin_id, 'warning', 'Warning issued')

    assert outcome['opponent_id'] is None
    assert outcome['suspension'] is None
    assert outcome['fight_records'] == []
    assert outcome['dispute']['status'] == 'Resolved'

    notices = await engine.notifications.get_notifications(1)
    assert notices[0]['title'] == 'Dispute Resolved'


@pytest.mark.asyncio
async def test_resolution_input_and_permissions(engine, pair, admin_id):
    await pair()
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)

    with pytest.raises(Unauthorized):
        await engine.resolve_dispute(dispute['dispute_id'], 1, 'warning', 'Self-service')
    with pytest.raises(ValidationError):
        await engine.resolve_dispute(dispute['dispute_id'], admin_id, 'exile', 'Gone')
    with pytest.raises(ValidationError):
        await engine.resolve_dispute(dispute['dispute_id'], admin_id, 'warning', '   ')
    with pytest.raises(NotFound):
        await engine.resolve_dispute(404, admin_id, 'warning', 'Warning issued')

    assert (await engine.disputes.get_dispute(dispute['dispute_id']))['status'] == 'Open'


@pytest.mark.asyncio
async def test_admin_messages_are_stored_and_delivered(engine, pair, admin_id):
    await pair()
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)

    outcome = await engine.resolve_dispute(
        dispute['dispute_id'], admin_id, 'dispute_invalid', 'No evidence',
        admin_notes='Clip was from a different match',
        message_to_disputer='Please attach the full fight next time',
        message_to_opponent='No action taken against you',
    )

    resolved = outcome['dispute']
    assert resolved['admin_notes'] == 'Clip was from a different match'
    assert resolved['admin_message_to_disputer'] == 'Please attach the full fight next time'
    assert resolved['admin_message_to_opponent'] == 'No action taken against you'

    thread = await engine.get_messages(dispute['dispute_id'])
    assert [m['sender_role'] for m in thread] == ['admin', 'admin']

    disputer_notice = (await engine.notifications.get_notifications(1))[0]
    assert disputer_notice['message'] == 'Please attach the full fight next time'
    opponent_notice = (await engine.notifications.get_notifications(2))[0]
    assert opponent_notice['message'] == 'No action taken against you'


@pytest.mark.asyncio
async def test_notification_failure_keeps_resolution(engine, pair, admin_id, monkeypatch):
    await pair()
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)

    async def broken_delivery(event):
        raise RuntimeError('notification store offline')

    monkeypatch.setattr(engine.notifications, '_deliver', broken_delivery)

    outcome = await engine.resolve_dispute(dispute['dispute_id'], admin_id, 'give_win_to_submitter', 'Win awarded')

    assert outcome['dispute']['status'] == 'Resolved'
    assert (await engine.get_fighter(1))['points'] == 15


@pytest.mark.asyncio
async def test_admin_supplies_opponent_after_missing_party(engine, make_fighter, admin_id):
    await make_fighter(1, 'Disputer', points=10)
    await make_fighter(2, 'Iron Mike', points=10)
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_name='Iorn Mike')
    dispute_id = dispute['dispute_id']

    with pytest.raises(MissingParty):
        await engine.resolve_dispute(dispute_id, admin_id, 'give_win_to_submitter', 'Win awarded')
    with pytest.raises(ValidationError):
        await engine.resolve_dispute(dispute_id, admin_id, 'give_win_to_submitter', 'Win awarded', opponent_id=1)
    with pytest.raises(NotFound):
        await engine.resolve_dispute(dispute_id, admin_id, 'give_win_to_submitter', 'Win awarded', opponent_id=404)
    assert (await engine.disputes.get_dispute(dispute_id))['status'] == 'Open'

    outcome = await engine.resolve_dispute(
        dispute_id, admin_id, 'give_win_to_submitter', 'Win awarded', opponent_id=2
    )

    assert outcome['opponent_id'] == 2
    assert outcome['dispute']['opponent_id'] == 2
    assert outcome['dispute']['status'] == 'Resolved'
    assert (await engine.get_fighter(1))['points'] == 15
    assert (await engine.get_fighter(2))['points'] == 7


@pytest.mark.asyncio
async def test_admin_chosen_opponent_overrides_stored_one(engine, make_fighter, admin_id):
    await make_fighter(1, 'Disputer', points=10)
    await make_fighter(2, 'Wrong Guy', points=10)
    await make_fighter(3, 'Right Guy', points=10)
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)

    outcome = await engine.resolve_dispute(
        dispute['dispute_id'], admin_id, 'one_week_suspension', 'Suspended', opponent_id=3
    )

    assert outcome['opponent_id'] == 3
    assert outcome['dispute']['opponent_id'] == 3
    assert (await engine.get_fighter(3))['banned_until'] is not None
    assert (await engine.get_fighter(2))['banned_until'] is None


@pytest.mark.asyncio
async def test_opponent_message_without_opponent_is_rejected(engine, make_fighter, admin_id):
    await make_fighter(1, 'Disputer')
    dispute = await engine.open_dispute(1, 'other', 'Rude in chat', opponent_name='Ghost')

    with pytest.raises(ValidationError):
        await engine.resolve_dispute(
            dispute['dispute_id'], admin_id, 'warning', 'Warning issued',
            message_to_opponent='Keep it civil'
        )

    assert (await engine.disputes.get_dispute(dispute['dispute_id']))['status'] == 'Open'
    assert await engine.get_messages(dispute['dispute_id']) == []
