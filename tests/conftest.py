"""
Fixture pytest per il gioco dei numeri.
"""

import pytest

import app as app_module
from logic import Game


class FixedSecretSource:
    """Sorgente che restituisce sempre lo stesso numero segreto (limitato a max_value)."""

    def __init__(self, secret):
        self.secret = secret
        self.draws = []

    def draw(self, max_value):
        self.draws.append(max_value)
        return min(self.secret, max_value)


@pytest.fixture
def make_source():
    """Costruttore di sorgenti con numero segreto fisso."""
    return FixedSecretSource


@pytest.fixture
def fixed_source(make_source):
    return make_source(7)


@pytest.fixture
def game(fixed_source):
    """Gioco 1..10 con numero segreto 7."""
    return Game(10, source=fixed_source)


@pytest.fixture
def flask_app(monkeypatch, fixed_source):
    app_module.app.config['TESTING'] = True
    monkeypatch.setattr(app_module, 'secret_source', fixed_source)
    app_module.game_data.clear()
    yield app_module.app
    app_module.game_data.clear()


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture
def logged_client(client):
    """Client HTTP con un utente già in sessione."""
    client.post('/start_game', data={'username': 'mario'})
    return client


@pytest.fixture
def socket_client(flask_app, logged_client):
    sc = app_module.socketio.test_client(flask_app, flask_test_client=logged_client)
    yield sc
    if sc.is_connected():
        sc.disconnect()
