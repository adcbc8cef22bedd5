from datetime import datetime, timedelta, timezone

from livechart.data.models import DataPoint

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_point(i: int, price: float = 130.0) -> DataPoint:
    """Point n°i, espacé de 10s depuis T0."""
    return DataPoint(timestamp=T0 + timedelta(seconds=10 * i), price=price + i,
                     buy_volume=1.0, sell_volume=2.0)


def make_points(n: int, offset: int = 0) -> list[DataPoint]:
    return [make_point(offset + i) for i in range(n)]
