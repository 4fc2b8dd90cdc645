def _payloads(received, name):
    return [pkt['args'][0] for pkt in received if pkt['name'] == name]


def _create_moderated(sio_factory):
    moderator = sio_factory()
    moderator.emit('room:create')
    received = moderator.get_received()
    created = _payloads(received, 'room:created')
    assert created and created[0]['mode'] == 'moderated'
    return moderator, created[0]['roomCode'], received


def test_moderator_create_broadcasts_both_snapshots(sio_factory):
    _, code, received = _create_moderated(sio_factory)
    public = _payloads(received, 'room:state')
    private = _payloads(received, 'room:moderator_state')
    assert public[-1]['code'] == code
    assert public[-1]['phase'] == 'lobby'
    assert public[-1]['question'] == '—'
    assert private[-1]['key'] == []


def test_join_and_play_a_question(sio_factory):
    moderator, code, _ = _create_moderated(sio_factory)
    player = sio_factory()

    player.emit('room:join', {'roomCode': code.lower(), 'name': '  Ann  '})
    state = _payloads(player.get_received(), 'room:state')[-1]
    assert state['players'] == [{'name': 'Ann', 'score': 0}]
    moderator.get_received()

    moderator.emit('game:advance', {'roomCode': code})
    state = _payloads(player.get_received(), 'room:state')[-1]
    assert state['phase'] == 'question'
    assert state['questionNumber'] == 1
    assert 'key' not in state

    key = _payloads(moderator.get_received(), 'room:moderator_state')[-1]['key']
    best = key[-1]

    player.emit('answer:submit', {'roomCode': code, 'text': best['text'].upper()})
    state = _payloads(player.get_received(), 'room:state')[-1]
    assert state['phase'] == 'results'
    assert state['players'] == [{'name': 'Ann', 'score': best['points']}]
    assert state['submissions'][0]['points'] == best['points']


def test_join_unknown_room_errors_to_caller_only(sio_factory):
    bystander = sio_factory()
    player = sio_factory()
    player.emit('room:join', {'roomCode': 'NOPE42', 'name': 'Ann'})
    assert _payloads(player.get_received(), 'room:error') == [{'error': 'room_not_found'}]
    assert bystander.get_received() == []


def test_non_moderator_control_gets_no_feedback(sio_factory, flask_app):
    moderator, code, _ = _create_moderated(sio_factory)
    player = sio_factory()
    player.emit('room:join', {'roomCode': code, 'name': 'Ann'})
    player.get_received()
    moderator.get_received()

    player.emit('game:advance', {'roomCode': code})
    player.emit('game:reset', {'roomCode': code})
    player.emit('room:set_duration', {'roomCode': code, 'seconds': 99})
    assert player.get_received() == []
    assert moderator.get_received() == []
    assert flask_app.extensions['quizroom'].get_room(code).phase == 'lobby'


def test_malformed_payloads_are_tolerated(sio_factory):
    moderator, code, _ = _create_moderated(sio_factory)
    moderator.emit('room:set_duration', {'roomCode': code, 'seconds': 'soon'})
    state = _payloads(moderator.get_received(), 'room:state')[-1]
    assert state['questionDuration'] == 30

    moderator.emit('room:set_question_count', {'roomCode': code, 'count': 25})
    state = _payloads(moderator.get_received(), 'room:state')[-1]
    assert state['totalQuestions'] == 12

    moderator.emit('game:advance', 'not-a-dict')
    assert _payloads(moderator.get_received(), 'room:error') == [{'error': 'room_not_found'}]


def test_auto2_starts_when_second_player_joins(sio_factory):
    first = sio_factory()
    first.emit('room:create_auto', {'mode': 'auto2', 'name': 'Ann', 'seconds': 20, 'count': 10})
    received = first.get_received()
    code = _payloads(received, 'room:created')[0]['roomCode']
    assert _payloads(received, 'room:state')[-1]['phase'] == 'lobby'

    second = sio_factory()
    second.emit('room:join', {'roomCode': code, 'name': 'Bob'})
    state = _payloads(second.get_received(), 'room:state')[-1]
    assert state['phase'] == 'question'
    assert state['timeLeft'] == 20
    assert _payloads(first.get_received(), 'room:state')[-1]['phase'] == 'question'


def test_countdown_ticks_reach_clients(sio_factory, scheduler):
    first = sio_factory()
    first.emit('room:create_auto', {'mode': 'solo', 'name': 'Ann', 'seconds': 10, 'count': 10})
    first.get_received()

    scheduler.advance(2)
    ticks = [s['timeLeft'] for s in _payloads(first.get_received(), 'room:state')]
    assert ticks == [9, 8]

    scheduler.advance(8)
    assert _payloads(first.get_received(), 'room:state')[-1]['phase'] == 'results'
    scheduler.advance(3)
    state = _payloads(first.get_received(), 'room:state')[-1]
    assert state['phase'] == 'question'
    assert state['questionNumber'] == 2


def test_disconnect_updates_remaining_players(sio_factory):
    first = sio_factory()
    first.emit('room:create_auto', {'mode': 'auto2', 'name': 'Ann'})
    code = _payloads(first.get_received(), 'room:created')[0]['roomCode']
    second = sio_factory()
    second.emit('room:join', {'roomCode': code, 'name': 'Bob'})
    first.get_received()

    second.disconnect()
    state = _payloads(first.get_received(), 'room:state')[-1]
    assert state['phase'] == 'lobby'
    assert state['playerCount'] == 1
    assert state['questionNumber'] == 0
