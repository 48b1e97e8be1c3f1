import time

from s3file.keys import KEY_PATTERN, generate_key


def test_keys_are_unique_across_many_calls():
    keys = [generate_key() for _ in range(5000)]
    assert len(set(keys)) == len(keys)


def test_key_has_three_segments_and_timestamp():
    key = generate_key()
    assert KEY_PATTERN.match(key), key

    first, second, rest = key.split("/")
    third, ts = rest.split("-")
    for segment in (first, second, third):
        assert len(segment) == 4
        int(segment, 16)
    assert int(ts) > 1_600_000_000_000  # epoch milliseconds


def test_key_timestamp_never_goes_backwards():
    stamps = [int(generate_key().rsplit("-", 1)[1]) for _ in range(200)]
    assert stamps == sorted(stamps)


def test_key_timestamp_holds_when_clock_steps_back(monkeypatch):
    now_ns = time.time_ns() + 10_000_000_000
    monkeypatch.setattr(time, "time_ns", lambda: now_ns)
    ahead = int(generate_key().rsplit("-", 1)[1])

    monkeypatch.setattr(time, "time_ns", lambda: now_ns - 5_000_000_000)
    after_step_back = int(generate_key().rsplit("-", 1)[1])

    assert after_step_back == ahead
