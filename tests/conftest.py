import random

import pytest
import nacl.signing

from registration import registration


def voting_key(i):
    'deterministic ed25519 voting public key, hex encoded'
    seed = bytes([i]) * 32
    return bytes(nacl.signing.SigningKey(seed).verify_key).hex()


@pytest.fixture
def voting_keys():
    return [voting_key(i) for i in range(8)]


@pytest.fixture
def rng():
    return random.Random(0)


def random_registration(rng, keys, purposes=(0,)):
    if rng.random() < 0.3:
        delegations = rng.choice(keys)
    else:
        delegations = [(rng.choice(keys), rng.randint(1, 10)) for _ in range(rng.randint(1, 4))]
    return registration(
        'reward%d' % rng.randint(0, 1000),
        rng.choice([0, 1, rng.randint(0, 1000), rng.randint(0, 2 ** 64 - 1)]),
        delegations,
        voting_purpose=rng.choice(purposes),
    )


@pytest.fixture
def make_raw(rng, voting_keys):
    def make(count=50, purposes=(0,)):
        return [random_registration(rng, voting_keys, purposes) for _ in range(count)]
    return make
