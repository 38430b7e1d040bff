import logging
import random
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger('numbersgame.logic')

DEFAULT_MAX = 100
# Limite del contatore dei tentativi (intero senza segno a 32 bit)
MAX_ATTEMPTS = 2 ** 32 - 1


class OutOfRangeError(ValueError):
    """Tentativo fuori dall'intervallo [1, max]."""

    def __init__(self, value, max_value):
        self.value = value
        self.max_value = max_value
        super().__init__(f"Tentativo fuori intervallo: {value} non è tra 1 e {max_value}")


class GuessResult(str, Enum):
    """Esito di un tentativo, con il tag usato nelle risposte."""
    TOO_LOW = "low"
    TOO_HIGH = "high"
    CORRECT = "correct"


@dataclass(frozen=True)
class GuessOutcome:
    result: GuessResult
    attempts: int

    def to_dict(self):
        # Il numero segreto non compare mai nella risposta
        return {"result": self.result.value, "attempts": self.attempts}


class RandomSecretSource:
    """
    Sorgente del numero segreto: estrazione uniforme in [1, max_value].
    Qualsiasi oggetto con un metodo draw(max_value) può sostituirla (es. nei test).
    """

    def __init__(self, seed=None):
        self._rng = random.Random(seed)

    def draw(self, max_value):
        return self._rng.randint(1, max_value)


def clamp_max(max_value, default=DEFAULT_MAX):
    """Normalizza il limite superiore: None diventa il default, i valori < 1 diventano 1."""
    if max_value is None:
        max_value = default
    return max(int(max_value), 1)


# Gestione di un singolo gioco
class Game:
    def __init__(self, max_value=None, source=None):
        self._source = source if source is not None else RandomSecretSource()
        self._max = clamp_max(max_value)
        self._secret = self._source.draw(self._max)  # Numero segreto
        self._attempts = 0       # Tentativi effettuati
        self._finished = False   # Diventa True dopo la risposta corretta
        logger.debug("Nuovo gioco con intervallo 1..%d", self._max)

    @property
    def max(self):
        """Limite superiore dell'intervallo (incluso)."""
        return self._max

    @property
    def attempts(self):
        """Tentativi validi effettuati dall'ultimo reset."""
        return self._attempts

    @property
    def finished(self):
        """True dopo la risposta corretta, fino al prossimo reset."""
        return self._finished

    def get_max(self):
        return self._max

    def get_attempts(self):
        return self._attempts

    def reset(self, max_value=None):
        """
        Ricomincia il gioco con un nuovo numero segreto.
        Se max_value è indicato aggiorna anche l'intervallo, altrimenti mantiene quello attuale.
        """
        if max_value is not None:
            self._max = clamp_max(max_value)
        self._secret = self._source.draw(self._max)
        self._attempts = 0
        self._finished = False
        logger.debug("Gioco ricominciato con intervallo 1..%d", self._max)

    def guess(self, value):
        """
        Metodo per gestire il tentativo di un giocatore.
        Ritorna un GuessOutcome con l'esito e il numero di tentativi.
        Solleva OutOfRangeError se il valore non è tra 1 e max, senza modificare lo stato.
        """
        # Il controllo dell'intervallo viene prima di tutto, anche a gioco finito
        if value < 1 or value > self._max:
            logger.info("Tentativo fuori intervallo: %s (max %d)", value, self._max)
            raise OutOfRangeError(value, self._max)

        if self._finished:
            return GuessOutcome(GuessResult.CORRECT, self._attempts)

        self._attempts = min(self._attempts + 1, MAX_ATTEMPTS)

        # Controlliamo se il numero è corretto
        if value < self._secret:
            result = GuessResult.TOO_LOW
        elif value > self._secret:
            result = GuessResult.TOO_HIGH
        else:
            result = GuessResult.CORRECT
            self._finished = True
            logger.info("Numero indovinato in %d tentativi", self._attempts)

        return GuessOutcome(result, self._attempts)


# Funzione per avviare un nuovo gioco
def start_new_game(max_value=None, source=None):
    """
    Inizializza un nuovo gioco con l'intervallo indicato.
    """
    return Game(max_value, source=source)
