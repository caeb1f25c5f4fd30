from datetime import datetime, timedelta, timezone
from decimal import Decimal

from assetline.engine.builders import build_crypto_series, build_finance_series, order_finance_series

from factories import crypto, day, finance_point, statement


def _ids(point):
    return [b.source_id for b in point.source_balances]


def test_finance_no_statements():
    assert build_finance_series([]) == []


def test_finance_one_point_per_day_at_utc_midnight():
    points = build_finance_series([
        statement("A", day(3, 14), 100),
        statement("B", day(3, 9), 50),
        statement("A", day(7, 23, 59), 120),
    ])

    assert [p.timestamp for p in points] == [day(3), day(7)]
    assert all(p.timestamp.tzinfo is not None for p in points)
    assert points[0].total_balance == Decimal("150")


def test_finance_last_statement_of_day_wins():
    points = build_finance_series([
        statement("A", day(2, 8), 10),
        statement("A", day(2, 18), 30),
        statement("A", day(2, 12), 20),
    ])

    assert len(points) == 1
    assert points[0].source_balances[0].balance == Decimal("30")
    assert points[0].total_balance == Decimal("30")


def test_finance_same_instant_ties_follow_input_order():
    points = build_finance_series([
        statement("A", day(2, 8), 10),
        statement("A", day(2, 8), 11),
    ])
    assert points[0].source_balances[0].balance == Decimal("11")


def test_finance_forward_fill_carries_balances():
    points = build_finance_series([
        statement("A", day(1), 100),
        statement("B", day(5), 40),
        statement("A", day(10), 80),
    ])

    assert [p.total_balance for p in points] == [Decimal("100"), Decimal("140"), Decimal("120")]
    assert _ids(points[2]) == ["A", "B"]
    balances = {b.source_id: b.balance for b in points[2].source_balances}
    assert balances == {"A": Decimal("80"), "B": Decimal("40")}


def test_finance_source_sets_only_grow():
    points = build_finance_series([
        statement("C", day(9), 1),
        statement("A", day(1), 1),
        statement("B", day(4), 1),
        statement("A", day(6), 2),
    ])

    for prev, nxt in zip(points, points[1:]):
        assert set(_ids(prev)) <= set(_ids(nxt))
        assert prev.timestamp < nxt.timestamp


def test_finance_total_is_sum_of_sources():
    points = build_finance_series([
        statement("A", day(1), "100.25"),
        statement("B", day(1), "0.75"),
        statement("C", day(2), "-20"),
    ])
    for p in points:
        assert p.total_balance == sum(b.balance for b in p.source_balances)


def test_finance_groups_by_utc_date():
    plus_two = timezone(timedelta(hours=2))
    # 01:00 +02:00 on the 5th is 23:00 UTC on the 4th
    points = build_finance_series([
        statement("A", datetime(2024, 1, 5, 1, 0, tzinfo=plus_two), 10),
        statement("B", day(4, 12), 5),
    ])
    assert [p.timestamp for p in points] == [day(4)]
    assert points[0].total_balance == Decimal("15")


def test_finance_naive_dates_read_as_utc():
    points = build_finance_series([statement("A", datetime(2024, 1, 3, 10), 10)])
    assert points[0].timestamp == day(3)


def test_crypto_sorted_ascending():
    series = build_crypto_series([crypto(day(5), 200), crypto(day(1), 100), crypto(day(3), 150)])
    assert [s.timestamp for s in series] == [day(1), day(3), day(5)]


def test_crypto_duplicate_timestamps_keep_last():
    series = build_crypto_series([crypto(day(1), 100), crypto(day(1), 110), crypto(day(2), 120)])
    assert len(series) == 2
    assert series[0].total_value_usd == Decimal("110")


def test_crypto_empty():
    assert build_crypto_series([]) == []


def test_crypto_timestamps_normalised_to_utc():
    series = build_crypto_series([crypto(datetime(2024, 1, 1, 12), 1)])
    assert series[0].timestamp == day(1, 12)
    assert series[0].timestamp.tzinfo is not None


def test_crypto_truncated_to_milliseconds():
    series = build_crypto_series([
        crypto(day(1) + timedelta(microseconds=1500), 1),
        crypto(day(1) + timedelta(microseconds=1999), 2),
        crypto(day(1) + timedelta(microseconds=2001), 3),
    ])
    assert [s.timestamp for s in series] == [day(1) + timedelta(milliseconds=1), day(1) + timedelta(milliseconds=2)]
    assert [s.total_value_usd for s in series] == [Decimal("2"), Decimal("3")]


def test_order_finance_series():
    points = order_finance_series([finance_point(day(4), A=4), finance_point(day(1), A=1), finance_point(day(4), A=5)])
    assert [p.timestamp for p in points] == [day(1), day(4)]
    assert points[1].total_balance == Decimal("5")
