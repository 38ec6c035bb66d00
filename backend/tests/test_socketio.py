from mathquiz import socketio


def payloads(received, name):
    return [pkt['args'][0] for pkt in received if pkt['name'] == name]


def test_socket_join_and_answer(flask_app, sio_client, scheduler):
    assert sio_client.is_connected()
    # Flush the leaderboard sent on connect
    sio_client.get_received()

    sio_client.emit('joinGame', 'Alice')
    received = sio_client.get_received()
    questions = payloads(received, 'newQuestion')
    assert len(questions) == 1
    assert questions[0]['index'] == 1
    assert questions[0]['total'] == 10
    assert 'answer' not in questions[0]
    assert payloads(received, 'updateTimer') == [{'secondsLeft': 60}]
    assert payloads(received, 'playerCount')[-1] == 1

    engine = flask_app.extensions['quiz_engine']
    session = engine.registry.snapshot()[0]
    assert session.display_name == 'Alice'
    expected = session.current_question.expected_answer

    sio_client.emit('submitAnswer', {'questionId': questions[0]['id'], 'answer': str(expected)})
    feedback = payloads(sio_client.get_received(), 'answerFeedback')
    assert feedback == [{'isCorrect': True, 'correctAnswer': expected}]

    scheduler.advance(1)
    received = sio_client.get_received()
    assert [q['index'] for q in payloads(received, 'newQuestion')] == [2]
    assert payloads(received, 'updateLeaderboard')[-1][0]['score'] == 10


def test_join_with_dict_payload(flask_app, sio_client):
    sio_client.emit('joinGame', {'displayName': 'Bob'})
    engine = flask_app.extensions['quiz_engine']
    assert [s.display_name for s in engine.registry.snapshot()] == ['Bob']


def test_malformed_submission_is_ignored(flask_app, sio_client):
    sio_client.emit('joinGame', 'Alice')
    sio_client.get_received()

    sio_client.emit('submitAnswer', 'not-a-dict')

    assert payloads(sio_client.get_received(), 'answerFeedback') == []
    session = flask_app.extensions['quiz_engine'].registry.snapshot()[0]
    assert session.timer is not None


def test_disconnect_updates_other_players(flask_app, sio_client):
    other = socketio.test_client(flask_app)
    sio_client.emit('joinGame', 'Alice')
    other.emit('joinGame', 'Bob')
    other.get_received()

    sio_client.disconnect()

    counts = payloads(other.get_received(), 'playerCount')
    assert counts[-1] == 1
    engine = flask_app.extensions['quiz_engine']
    assert [s.display_name for s in engine.registry.snapshot()] == ['Bob']
    other.disconnect()
    assert len(engine.registry) == 0
