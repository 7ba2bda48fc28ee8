from datetime import datetime, timedelta, timezone

import pytest

from cardshop.domain.cards.keys import chunked, normalize_card_keys, sanitize_card_keys
from cardshop.domain.cards.reservation import as_utc, is_recently_reserved, reservation_cutoff


def test_normalize_splits_on_newlines_only():
    text = "AAAA-1111,extra\nBBBB;2222\n  CCCC\t3333  \n"
    assert normalize_card_keys(text) == ["AAAA-1111,extra", "BBBB;2222", "CCCC\t3333"]


def test_normalize_handles_crlf_and_blank_lines():
    text = "first\r\n\r\n   \nsecond\r\nfirst\n"
    assert normalize_card_keys(text) == ["first", "second", "first"]


def test_normalize_empty_input():
    assert normalize_card_keys("") == []
    assert normalize_card_keys("\n \n\t\n") == []
    assert normalize_card_keys(None) == []


def test_sanitize_trims_and_drops_empty():
    assert sanitize_card_keys([" a ", "", "b\t", "   ", None]) == ["a", "b"]


def test_chunked_reconstructs_input():
    keys = [f"key-{i}" for i in range(23)]
    for size in (1, 5, 10, 22, 23, 50):
        batches = list(chunked(keys, size))
        assert [key for batch in batches for key in batch] == keys
        assert all(len(batch) == size for batch in batches[:-1])
        assert 1 <= len(batches[-1]) <= size


def test_chunked_rejects_non_positive_size():
    with pytest.raises(ValueError):
        list(chunked(["a"], 0))


def test_chunked_empty_input_yields_nothing():
    assert list(chunked([], 50)) == []


def test_reservation_window_is_sixty_seconds():
    now = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)
    assert reservation_cutoff(now) == now - timedelta(seconds=60)
    assert is_recently_reserved(now - timedelta(seconds=30), now)
    assert not is_recently_reserved(now - timedelta(seconds=90), now)
    assert not is_recently_reserved(None, now)


def test_naive_timestamps_are_treated_as_utc():
    now = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)
    naive = datetime(2026, 10, 18, 11, 59, 45)
    assert as_utc(naive).tzinfo == timezone.utc
    assert is_recently_reserved(naive, now)
