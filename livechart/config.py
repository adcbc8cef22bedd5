# livechart/config.py
import os

from dotenv import load_dotenv

# Charge .env (si présent)
load_dotenv()


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip() in ("1", "true", "True", "yes")


# =========================
#  Fenêtre / Pan
# =========================

# Nombre de points visibles (fenêtre glissante fixe)
WINDOW_SIZE: int = int(os.getenv("WINDOW_SIZE", "60"))

# 10px de drag = 1 point de décalage
PIXELS_PER_INDEX: float = float(os.getenv("PIXELS_PER_INDEX", "10"))

# =========================
#  Mise à jour périodique
# =========================

# Période du timer (ms) : un point par tick
UPDATE_INTERVAL_MS: int = int(os.getenv("UPDATE_INTERVAL_MS", "10000"))

# Historique pré-chargé au démarrage (0 = départ à vide)
INITIAL_POINTS: int = int(os.getenv("INITIAL_POINTS", "60"))

# En debug, une violation d'invariant (append hors ordre) fait planter l'appli
STRICT_INVARIANTS: bool = _flag("STRICT_INVARIANTS")

# =========================
#  Source de données
# =========================

# "simulated" ou "coingecko"
DATA_SOURCE: str = os.getenv("DATA_SOURCE", "simulated").strip().lower()

COINGECKO_URL: str = os.getenv("COINGECKO_URL", "https://api.coingecko.com/api/v3")
COINGECKO_COIN_ID: str = os.getenv("COINGECKO_COIN_ID", "bitcoin")
COINGECKO_VS_CURRENCY: str = os.getenv("COINGECKO_VS_CURRENCY", "usd")
FETCH_TIMEOUT_SEC: float = float(os.getenv("FETCH_TIMEOUT_SEC", "10"))

# =========================
#  Logs
# =========================

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
