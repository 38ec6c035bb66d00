def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    data = res.get_json()
    assert data['players'] == 0
    assert data['questions'] == 10
    assert data['time_limit_sec'] == 60


def test_leaderboard_snapshot(flask_app, client):
    engine = flask_app.extensions['quiz_engine']
    engine.join('sid-x', 'Alice')
    engine.join('sid-y', 'Bob')
    session = engine.registry.get('sid-y')
    engine.submit_answer('sid-y', session.current_question.id, session.current_question.expected_answer)

    res = client.get('/api/leaderboard')
    assert res.status_code == 200
    assert res.get_json() == [
        {'id': 'sid-y', 'displayName': 'Bob', 'score': 10, 'statusLabel': 'Q1/10'},
        {'id': 'sid-x', 'displayName': 'Alice', 'score': 0, 'statusLabel': 'Q1/10'},
    ]


def test_winners_snapshot(flask_app, client, scheduler):
    engine = flask_app.extensions['quiz_engine']
    assert client.get('/api/winners').get_json() == []

    engine.join('sid-x', 'Alice')
    session = engine.registry.get('sid-x')
    for _ in range(10):
        engine.submit_answer('sid-x', session.current_question.id, session.current_question.expected_answer)
        scheduler.advance(1)

    assert client.get('/api/winners').get_json() == [
        {'displayName': 'Alice', 'score': 100, 'formattedTime': '00:10.00'}
    ]
