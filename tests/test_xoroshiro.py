import itertools

from kxo.xoroshiro import DEFAULT_SEED, Xoroshiro


def test_default_seed():
    assert Xoroshiro().state == DEFAULT_SEED
    assert DEFAULT_SEED == (314159265, 1618033989)


def test_first_value_from_unit_seed():
    rng = Xoroshiro(1, 0)
    assert rng.next() == (1 << 24) + 1


def test_same_seed_same_sequence():
    a = Xoroshiro(7, 11)
    b = Xoroshiro(7, 11)
    assert [a.next() for _ in range(20)] == [b.next() for _ in range(20)]


def test_values_are_64_bit():
    rng = Xoroshiro()
    for value in itertools.islice(rng, 200):
        assert 0 <= value < 1 << 64


def test_state_changes_after_next():
    rng = Xoroshiro()
    before = rng.state
    rng.next()
    assert rng.state != before


def test_iterator_matches_next():
    a = Xoroshiro(3, 4)
    b = Xoroshiro(3, 4)
    assert list(itertools.islice(a, 5)) == [b.next() for _ in range(5)]


def test_zero_state_stays_zero():
    rng = Xoroshiro(0, 0)
    assert rng.next() == 0
    rng.jump()
    assert rng.state == (0, 0)


def test_jump_is_deterministic():
    a = Xoroshiro()
    b = Xoroshiro()
    a.jump()
    b.jump()
    assert a.state == b.state
    assert a.state != DEFAULT_SEED
    assert a.next() == b.next()


def test_jump_changes_sequence():
    a = Xoroshiro()
    b = Xoroshiro()
    b.jump()
    assert [a.next() for _ in range(5)] != [b.next() for _ in range(5)]


def test_seed_is_masked_to_64_bits():
    rng = Xoroshiro((1 << 64) + 5, (1 << 65) + 9)
    assert rng.state == (5, 9)