from flask import Flask, render_template, request, redirect, url_for, session, jsonify
from flask_socketio import SocketIO, emit
import logging
import os

from logic import OutOfRangeError, GuessResult, RandomSecretSource, start_new_game

# Configurazione da variabili d'ambiente
SECRET_KEY = os.getenv('NUMBERSGAME_SECRET_KEY', 'secret_key')  # Cambia questa chiave segreta per maggiore sicurezza
DEFAULT_MAX = int(os.getenv('NUMBERSGAME_DEFAULT_MAX', '100'))
LOG_LEVEL = os.getenv('NUMBERSGAME_LOG_LEVEL', 'WARNING')
DEBUG = os.getenv('NUMBERSGAME_DEBUG', '0') == '1'


def setup_logging(level='WARNING'):
    """Configura il logger 'numbersgame' (una sola volta) e ne imposta il livello."""
    numeric = getattr(logging, level.upper(), logging.WARNING)
    root = logging.getLogger('numbersgame')
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
        root.addHandler(handler)
    root.setLevel(numeric)
    return root


setup_logging(LOG_LEVEL)
logger = logging.getLogger('numbersgame.app')

app = Flask(__name__)
app.secret_key = SECRET_KEY
socketio = SocketIO(app)

# Un gioco per ogni utente, tenuto in memoria
game_data = {}

# Sorgente dei numeri segreti, sostituibile nei test
secret_source = RandomSecretSource()

MESSAGES = {
    GuessResult.TOO_LOW: 'Il numero è più alto!',
    GuessResult.TOO_HIGH: 'Il numero è più basso!',
    GuessResult.CORRECT: 'Hai vinto! Congratulazioni!',
}


class BadInput(ValueError):
    pass


def parse_int(value, name, required=True):
    """Converte un valore ricevuto dal client in intero, None se assente e non obbligatorio."""
    if value is None or value == '':
        if required:
            raise BadInput(f"Il campo '{name}' è obbligatorio")
        return None
    # Solo interi o stringhe di cifre: bool e float non sono ammessi
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    raise BadInput(f"Il campo '{name}' deve essere un numero intero")


def as_dict(data):
    """Dati ricevuti dal client: None diventa un dizionario vuoto, altri tipi non sono ammessi."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadInput("I dati inviati devono essere un oggetto JSON")
    return data


def new_game(username, max_value=None):
    if max_value is None:
        max_value = DEFAULT_MAX
    game = start_new_game(max_value, source=secret_source)
    game_data[username] = game
    logger.info("Nuovo gioco per %s (1..%d)", username, game.get_max())
    return game


def game_state(game):
    return {'max': game.get_max(), 'attempts': game.get_attempts(), 'finished': game.finished}


def error_response(code, message, status):
    return jsonify({'success': False, 'error': code, 'message': message}), status


def json_body():
    return as_dict(request.get_json(silent=True))


@app.route('/')
def index():
    return render_template('index.html')


@app.route('/start_game', methods=['POST'])
def start_game():
    username = request.form.get('username')
    if username:
        session['username'] = username
        return jsonify({'success': True})
    else:
        return jsonify({'success': False, 'error': 'Per favore, inserisci un nome utente!'})


@app.route('/play')
def play():
    if 'username' not in session:
        return redirect(url_for('index'))
    return render_template('play.html', username=session['username'], default_max=DEFAULT_MAX)


# API JSON

@app.route('/api/game', methods=['POST'])
def api_create_game():
    username = session.get('username')
    if not username:
        return error_response('not_authenticated', 'Non sei autenticato!', 401)
    try:
        max_value = parse_int(json_body().get('max'), 'max', required=False)
    except BadInput as e:
        return error_response('bad_input', str(e), 400)
    game = new_game(username, max_value)
    return jsonify(game_state(game)), 201


@app.route('/api/game', methods=['GET'])
def api_get_game():
    username = session.get('username')
    if not username:
        return error_response('not_authenticated', 'Non sei autenticato!', 401)
    game = game_data.get(username)
    if game is None:
        return error_response('no_game', 'Nessun gioco in corso', 404)
    return jsonify(game_state(game))


@app.route('/api/game/reset', methods=['POST'])
def api_reset_game():
    username = session.get('username')
    if not username:
        return error_response('not_authenticated', 'Non sei autenticato!', 401)
    game = game_data.get(username)
    if game is None:
        return error_response('no_game', 'Nessun gioco in corso', 404)
    try:
        max_value = parse_int(json_body().get('max'), 'max', required=False)
    except BadInput as e:
        return error_response('bad_input', str(e), 400)
    game.reset(max_value)
    return jsonify(game_state(game))


@app.route('/api/game/guess', methods=['POST'])
def api_guess():
    username = session.get('username')
    if not username:
        return error_response('not_authenticated', 'Non sei autenticato!', 401)
    game = game_data.get(username)
    if game is None:
        return error_response('no_game', 'Nessun gioco in corso', 404)
    try:
        value = parse_int(json_body().get('value'), 'value')
    except BadInput as e:
        return error_response('bad_input', str(e), 400)
    try:
        outcome = game.guess(value)
    except OutOfRangeError as e:
        return error_response('out_of_range', str(e), 400)
    return jsonify(outcome.to_dict())


# Eventi Socket.IO

@socketio.on('start_game')
def start_game_socket(data=None):
    username = session.get('username')
    if username:
        try:
            max_value = parse_int(as_dict(data).get('max'), 'max', required=False)
        except BadInput as e:
            emit('error', {'message': str(e)})
            return
        game = new_game(username, max_value)
        emit('game_started', {
            'message': f'Benvenuto {username}, indovina un numero tra 1 e {game.get_max()}!',
            'max': game.get_max(),
            'attempts': game.get_attempts(),
        })
    else:
        emit('error', {'message': 'Non sei autenticato!'})


@socketio.on('guess')
def make_guess(data=None):
    username = session.get('username')
    if username in game_data:
        game = game_data[username]
        try:
            guess = parse_int(as_dict(data).get('guess'), 'guess')
            outcome = game.guess(guess)
        except BadInput as e:
            emit('error', {'message': str(e)})
            return
        except OutOfRangeError:
            emit('error', {'message': f'Il numero deve essere tra 1 e {game.get_max()}!'})
            return
        payload = outcome.to_dict()
        payload['message'] = MESSAGES[outcome.result] + f' Tentativi: {outcome.attempts}'
        emit('result', payload)
    else:
        emit('error', {'message': 'Errore nel gioco. Riprova!'})


@socketio.on('reset')
def reset_game_socket(data=None):
    username = session.get('username')
    if username in game_data:
        game = game_data[username]
        try:
            max_value = parse_int(as_dict(data).get('max'), 'max', required=False)
        except BadInput as e:
            emit('error', {'message': str(e)})
            return
        game.reset(max_value)
        emit('game_reset', {
            'message': f'Intervallo 1..{game.get_max()}. Nuovo numero segreto generato.',
            'max': game.get_max(),
            'attempts': game.get_attempts(),
        })
    else:
        emit('error', {'message': 'Errore nel gioco. Riprova!'})


if __name__ == '__main__':
    socketio.run(app, debug=DEBUG)
