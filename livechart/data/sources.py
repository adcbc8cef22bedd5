# livechart/data/sources.py
from __future__ import annotations

import logging
import math
import random
from datetime import datetime, timedelta, timezone

import pandas as pd
import requests

from livechart import config

from .errors import SourceUnavailable
from .models import DataPoint

log = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class DataSource:
    """
    Fournit un point par tick. Appelé depuis le thread worker du scheduler :
    next_point() peut bloquer (fetch réseau), jamais le thread UI.
    """
    name = "source"

    def next_point(self) -> DataPoint:
        raise NotImplementedError

    def history(self, count: int, interval: timedelta) -> list[DataPoint]:
        """Historique initial (plus ancien -> plus récent). Vide par défaut."""
        return []


# ---------- Simulation ----------
class SimulatedSource(DataSource):
    """Générateur aléatoire : prix ~130-140, achats/ventes 0-50."""
    name = "simulated"

    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)

    def _make(self, ts: datetime) -> DataPoint:
        return DataPoint(
            timestamp=ts,
            price=130 + self._rng.random() * 10,
            buy_volume=self._rng.random() * 50,
            sell_volume=self._rng.random() * 50,
        )

    def next_point(self) -> DataPoint:
        return self._make(_now())

    def history(self, count: int, interval: timedelta) -> list[DataPoint]:
        # count points espacés de `interval`, le dernier un intervalle avant maintenant
        now = _now()
        return [self._make(now - interval * (count - i)) for i in range(count)]


# ---------- CoinGecko ----------
class CoinGeckoSource(DataSource):
    """
    Prix via l'API publique CoinGecko (market_chart, 1 jour).
    Les volumes achat/vente sont dérivés du prix (pas fournis par l'endpoint).
    """
    name = "coingecko"

    def __init__(self, coin_id: str = config.COINGECKO_COIN_ID,
                 vs_currency: str = config.COINGECKO_VS_CURRENCY,
                 base_url: str = config.COINGECKO_URL,
                 timeout: float = config.FETCH_TIMEOUT_SEC,
                 session: requests.Session | None = None,
                 seed: int | None = None):
        self.coin_id = coin_id
        self.vs_currency = vs_currency
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = session or requests.Session()
        self._http.headers.setdefault("User-Agent", "livechart/1.0")
        self._rng = random.Random(seed)

    def _derived_volume(self, price: float) -> float:
        return float(math.floor(price / 1000 + self._rng.random() * 10))

    def _fetch_prices(self) -> pd.DataFrame:
        url = f"{self.base_url}/coins/{self.coin_id}/market_chart"
        params = {"vs_currency": self.vs_currency, "days": "1"}
        try:
            r = self._http.get(url, params=params, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except requests.Timeout as e:
            raise SourceUnavailable(f"timeout CoinGecko ({self.timeout}s)") from e
        except requests.RequestException as e:
            raise SourceUnavailable(f"CoinGecko: {e}") from e
        except ValueError as e:
            raise SourceUnavailable("CoinGecko: réponse non JSON") from e

        prices = data.get("prices") if isinstance(data, dict) else None
        if not prices:
            raise SourceUnavailable("CoinGecko: aucun prix dans la réponse")
        try:
            df = pd.DataFrame(prices, columns=["time", "price"])
        except ValueError as e:
            raise SourceUnavailable("CoinGecko: format de prix inattendu") from e

        df["price"] = pd.to_numeric(df["price"], errors="coerce")
        df = df.dropna().sort_values("time", kind="stable")
        if df.empty:
            raise SourceUnavailable("CoinGecko: prix illisibles")
        return df

    def next_point(self) -> DataPoint:
        df = self._fetch_prices()
        price = float(df.iloc[-1]["price"])
        # horodaté "maintenant" : un tick = un point, pas l'heure du sample
        return DataPoint(
            timestamp=_now(),
            price=price,
            buy_volume=self._derived_volume(price),
            sell_volume=self._derived_volume(price),
        )

    def history(self, count: int, interval: timedelta) -> list[DataPoint]:
        if count <= 0:
            return []
        df = self._fetch_prices().tail(count)
        times = pd.to_datetime(df["time"], unit="ms", utc=True)
        out: list[DataPoint] = []
        for ts, price in zip(times, df["price"]):
            p = float(price)
            out.append(DataPoint(
                timestamp=ts.to_pydatetime(),
                price=p,
                buy_volume=self._derived_volume(p),
                sell_volume=self._derived_volume(p),
            ))
        return out


SOURCES = {"simulated": SimulatedSource, "coingecko": CoinGeckoSource}


def make_source(name: str | None = None) -> DataSource:
    name = (name or config.DATA_SOURCE).strip().lower()
    try:
        cls = SOURCES[name]
    except KeyError:
        raise ValueError(f"DATA_SOURCE inconnue: {name!r} (attendu: {', '.join(SOURCES)})") from None
    log.info("source de données: %s", name)
    return cls()
