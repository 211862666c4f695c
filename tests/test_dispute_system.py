import pytest

from utils.errors import NotFound, ValidationError, Unauthorized, InvalidTransition


@pytest.fixture
def fighters(make_fighter):
    async def _setup():
        await make_fighter(1, 'Disputer')
        await make_fighter(2, 'Opponent')
        await make_fighter(3, 'Bystander')
    return _setup


@pytest.mark.asyncio
async def test_open_dispute_with_explicit_opponent(engine, fighters):
    await fighters()

    dispute = await engine.open_dispute(
        1, 'Excessive Punches', '  Threw 400 jabs in round one  ',
        opponent_id=2, evidence_urls=['https://clips.example.com/a']
    )

    assert dispute['status'] == 'Open'
    assert dispute['category'] == 'excessive_punches'
    assert dispute['reason'] == 'Threw 400 jabs in round one'
    assert dispute['opponent_id'] == 2
    assert dispute['evidence_urls'] == ['https://clips.example.com/a']

    notices = await engine.notifications.get_notifications(2)
    assert notices[0]['title'] == 'Dispute Filed'


@pytest.mark.asyncio
async def test_open_dispute_through_scheduled_fight(engine, database, fighters):
    await fighters()
    fight_id = await database.create_scheduled_fight(1, 2, 'Heavyweight')

    dispute = await engine.open_dispute(1, 'cheating', 'Used a macro', fight_id=fight_id)

    assert dispute['opponent_id'] == 2
    assert dispute['fight_id'] == fight_id
    assert (await database.get_scheduled_fight(fight_id))['status'] == 'Disputed'


@pytest.mark.asyncio
async def test_open_dispute_keeps_unresolved_name(engine, fighters):
    await fighters()

    dispute = await engine.open_dispute(1, 'spamming', 'Spammed the clinch', opponent_name='Unknown Guy')

    assert dispute['opponent_id'] is None
    assert dispute['opponent_name'] == 'Unknown Guy'


@pytest.mark.asyncio
@pytest.mark.parametrize('kwargs', [
    {'category': 'bribery', 'reason': 'Paid the judges', 'opponent_id': 2},
    {'category': 'cheating', 'reason': '   ', 'opponent_id': 2},
    {'category': 'cheating', 'reason': 'Macro', 'opponent_id': 2, 'evidence_urls': ['clip.mp4']},
    {'category': 'cheating', 'reason': 'Macro', 'opponent_id': 2, 'fight_link': 'not a link'},
    {'category': 'cheating', 'reason': 'Macro'},
    {'category': 'cheating', 'reason': 'Macro', 'opponent_id': 1},
])
async def test_open_dispute_rejects_bad_input(engine, fighters, kwargs):
    await fighters()

    with pytest.raises(ValidationError):
        await engine.open_dispute(1, **kwargs)

    assert await engine.list_disputes() == []


@pytest.mark.asyncio
async def test_open_dispute_unknown_parties(engine, fighters):
    await fighters()

    with pytest.raises(NotFound):
        await engine.open_dispute(404, 'cheating', 'Macro', opponent_id=2)
    with pytest.raises(NotFound):
        await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=404)
    with pytest.raises(NotFound):
        await engine.open_dispute(1, 'cheating', 'Macro', fight_id=404)


@pytest.mark.asyncio
async def test_viewing_never_changes_status(engine, fighters, admin_id):
    await fighters()
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)

    viewed = await engine.view_dispute(dispute['dispute_id'], as_admin=True, viewer_id=admin_id)
    assert viewed['status'] == 'Open'
    assert viewed['messages'] == []
    assert viewed['valid_transitions'] == ['In Review', 'Resolved']

    assert (await engine.disputes.get_dispute(dispute['dispute_id']))['status'] == 'Open'


@pytest.mark.asyncio
async def test_view_permissions(engine, fighters):
    await fighters()
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)

    assert (await engine.view_dispute(dispute['dispute_id'], viewer_id=2))['dispute_id'] == dispute['dispute_id']

    with pytest.raises(Unauthorized):
        await engine.view_dispute(dispute['dispute_id'], viewer_id=3)
    with pytest.raises(Unauthorized):
        await engine.view_dispute(dispute['dispute_id'], as_admin=True, viewer_id=1)
    with pytest.raises(NotFound):
        await engine.view_dispute(404)


@pytest.mark.asyncio
async def test_mark_in_review(engine, fighters, admin_id):
    await fighters()
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)

    with pytest.raises(Unauthorized):
        await engine.mark_in_review(dispute['dispute_id'], 1)

    reviewed = await engine.mark_in_review(dispute['dispute_id'], admin_id)
    assert reviewed['status'] == 'In Review'

    again = await engine.mark_in_review(dispute['dispute_id'], admin_id)
    assert again['status'] == 'In Review'

    with pytest.raises(NotFound):
        await engine.mark_in_review(404, admin_id)


@pytest.mark.asyncio
async def test_admin_message_moves_open_dispute_to_in_review(engine, fighters, admin_id):
    await fighters()
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)

    fighter_reply = await engine.post_message(dispute['dispute_id'], 2, 'fighter', 'I did not cheat')
    assert fighter_reply['dispute_status'] == 'Open'

    admin_reply = await engine.post_message(dispute['dispute_id'], admin_id, 'admin', ' Please send the clip ')
    assert admin_reply['dispute_status'] == 'In Review'
    assert admin_reply['message'] == 'Please send the clip'

    messages = await engine.get_messages(dispute['dispute_id'])
    assert [(m['sender_id'], m['sender_role']) for m in messages] == [(2, 'fighter'), (admin_id, 'admin')]


@pytest.mark.asyncio
async def test_message_rules(engine, fighters, admin_id):
    await fighters()
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)
    dispute_id = dispute['dispute_id']

    with pytest.raises(Unauthorized):
        await engine.post_message(dispute_id, 3, 'fighter', 'Let me in')
    with pytest.raises(Unauthorized):
        await engine.post_message(dispute_id, 1, 'admin', 'I am the admin now')
    with pytest.raises(ValidationError):
        await engine.post_message(dispute_id, 1, 'fighter', '')
    with pytest.raises(ValidationError):
        await engine.post_message(dispute_id, 1, 'referee', 'Hello')
    with pytest.raises(NotFound):
        await engine.post_message(404, 1, 'fighter', 'Hello')

    await engine.resolve_dispute(dispute_id, admin_id, 'dispute_invalid', 'No evidence provided')

    with pytest.raises(InvalidTransition):
        await engine.post_message(dispute_id, 1, 'fighter', 'But wait')


@pytest.mark.asyncio
async def test_list_disputes_covers_both_sides(engine, fighters, admin_id):
    await fighters()
    first = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)
    second = await engine.open_dispute(3, 'exploits', 'Wall glitch', opponent_id=1)
    await engine.open_dispute(3, 'other', 'Rude', opponent_id=2)

    mine = await engine.list_disputes(fighter_id=1)
    assert {d['dispute_id'] for d in mine} == {first['dispute_id'], second['dispute_id']}

    await engine.resolve_dispute(first['dispute_id'], admin_id, 'warning', 'Keep it clean')
    resolved = await engine.list_disputes(status='Resolved')
    assert [d['dispute_id'] for d in resolved] == [first['dispute_id']]

    with pytest.raises(ValidationError):
        await engine.list_disputes(status='Under Appeal')


@pytest.mark.asyncio
async def test_purge_resolved_disputes(engine, fighters, admin_id):
    await fighters()
    resolved = await engine.open_dispute(1, 'cheating', 'Macro', opponent_id=2)
    still_open = await engine.open_dispute(1, 'spamming', 'Spam', opponent_id=2)
    await engine.post_message(resolved['dispute_id'], 1, 'fighter', 'Clip attached')
    await engine.resolve_dispute(resolved['dispute_id'], admin_id, 'warning', 'Final warning')

    with pytest.raises(Unauthorized):
        await engine.purge_resolved_disputes(1)

    assert await engine.purge_resolved_disputes(admin_id) == 1
    assert [d['dispute_id'] for d in await engine.list_disputes()] == [still_open['dispute_id']]
    with pytest.raises(NotFound):
        await engine.get_messages(resolved['dispute_id'])


@pytest.mark.asyncio
async def test_opponent_registered_later_can_post(engine, make_fighter, database):
    await make_fighter(1, 'Disputer')
    dispute = await engine.open_dispute(1, 'cheating', 'Macro', opponent_name='Iron Mike')
    assert dispute['opponent_id'] is None

    await engine.register_fighter(2, 'Iron Mike')
    posted = await engine.post_message(dispute['dispute_id'], 2, 'fighter', 'I never used a macro')

    assert posted['sender_id'] == 2
    assert (await database.get_dispute(dispute['dispute_id']))['opponent_id'] == 2
    assert [m['sender_id'] for m in await engine.get_messages(dispute['dispute_id'])] == [2]
