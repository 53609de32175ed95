#!/usr/bin/env python3
'''
Voting registrations as decoded from the chain, and the raw snapshot they form.

A raw snapshot is a JSON array of registrations:

```
[
    {
        "reward_address": "0xe1ffff2912572257b59dca84c965e4638a09f1524af7a15787eb0d8a46",
        "stake_public_key": "0xe7d6616840734686855ec80ee9658f5ead9e29e494ec6889a5d1988b50eb8d0f",
        "total_voting_power": 177689370111,
        "delegations": {
            "0xa6a3c0447aeb9cc54cf6422ba32b294e5e1c3ef6d782f2acff4a70694c4d1663": 3,
            "0x00588e8e1d18cba576a4d35758069fe94e53f638b6faf7c07b8abd2bc5c5cdee": 1
        },
        "voting_purpose": 0
    }
]
```

`delegations` is either a single key (legacy registration), a list of
`[key, weight]` pairs or an object mapping keys to weights. Objects keep the
order they are written in, the last entry takes the rounding remainder.
'''
import json
from collections import namedtuple

import nacl.exceptions
import nacl.signing

CATALYST_VOTING_PURPOSE_TAG = 0
MAX_U64 = 2 ** 64 - 1


class InvalidVotingKey(ValueError):
    pass


class InvalidRegistration(ValueError):
    pass


def normalize_voting_key(key):
    '''canonical form of a voting key: lowercase hex of the 32 bytes ed25519 public key
    :param key: hex string (optionally 0x prefixed), bytes or nacl VerifyKey'''
    if isinstance(key, nacl.signing.VerifyKey):
        return bytes(key).hex()
    if isinstance(key, str):
        text = key[2:] if key[:2].lower() == '0x' else key
        try:
            key = bytes.fromhex(text)
        except ValueError:
            raise InvalidVotingKey('voting key is not hex: %r' % key) from None
    if not isinstance(key, (bytes, bytearray)):
        raise InvalidVotingKey('unsupported voting key type: %s' % type(key).__name__)
    try:
        return bytes(nacl.signing.VerifyKey(bytes(key))).hex()
    except (nacl.exceptions.ValueError, nacl.exceptions.TypeError) as ex:
        raise InvalidVotingKey('invalid voting key %s: %s' % (bytes(key).hex(), ex)) from None


class Legacy(namedtuple('Legacy', ['voting_key'])):
    'single voting key receiving all the voting power'
    __slots__ = ()

    def to_json(self):
        return self.voting_key


class Weighted(namedtuple('Weighted', ['entries'])):
    'ordered (voting_key, weight) pairs, the last entry takes the remainder'
    __slots__ = ()

    def __new__(cls, entries):
        return super().__new__(cls, tuple((key, weight) for key, weight in entries))

    def total_weight(self):
        return sum(weight for _, weight in self.entries)

    def to_json(self):
        return [[key, weight] for key, weight in self.entries]


VotingRegistration = namedtuple(
    'VotingRegistration',
    ['stake_public_key', 'reward_address', 'voting_power', 'delegations', 'voting_purpose'],
    defaults=(CATALYST_VOTING_PURPOSE_TAG,),
)


def registration(reward_address, voting_power, delegations,
                 voting_purpose=CATALYST_VOTING_PURPOSE_TAG, stake_public_key=''):
    '''build a registration, delegations is a single key or a list of (key, weight)'''
    if isinstance(delegations, (Legacy, Weighted)):
        pass
    elif isinstance(delegations, (list, tuple)):
        delegations = Weighted((normalize_voting_key(key), weight) for key, weight in delegations)
    else:
        delegations = Legacy(normalize_voting_key(delegations))
    return VotingRegistration(stake_public_key, reward_address, voting_power, delegations, voting_purpose)


def registration_to_json(reg):
    return {
        'stake_public_key': reg.stake_public_key,
        'reward_address': reg.reward_address,
        'voting_power': reg.voting_power,
        'delegations': reg.delegations.to_json(),
        'voting_purpose': reg.voting_purpose,
    }


def _unsigned(value, field, index):
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRegistration('registration %d: %s must be an integer, got %r' % (index, field, value))
    if not 0 <= value <= MAX_U64:
        raise InvalidRegistration('registration %d: %s out of range: %d' % (index, field, value))
    return value


def _voting_key(key, index):
    try:
        return normalize_voting_key(key)
    except InvalidVotingKey as ex:
        raise InvalidRegistration('registration %d: %s' % (index, ex)) from None


def _weight(weight, index):
    weight = _unsigned(weight, 'delegation weight', index)
    if weight == 0:
        raise InvalidRegistration('registration %d: delegation weight must be positive' % index)
    return weight


class _Mapping(list):
    'json object kept as its ordered (key, value) pairs'


def _object_pairs(pairs):
    return _Mapping(pairs)


def _decode_delegations(value, index):
    if isinstance(value, str):
        return Legacy(_voting_key(value, index))
    if isinstance(value, _Mapping):
        keys = [key for key, _ in value]
        if len(set(keys)) != len(keys):
            raise InvalidRegistration('registration %d: duplicated key in delegations' % index)
        entries = value
    elif isinstance(value, list):
        entries = []
        for entry in value:
            if not isinstance(entry, list) or isinstance(entry, _Mapping) or len(entry) != 2:
                raise InvalidRegistration('registration %d: delegation must be a [key, weight] pair' % index)
            entries.append(entry)
    else:
        raise InvalidRegistration('registration %d: invalid delegations: %r' % (index, value))
    if not entries:
        raise InvalidRegistration('registration %d: delegations must not be empty' % index)
    return Weighted((_voting_key(key, index), _weight(weight, index)) for key, weight in entries)


def _decode_registration(obj, index):
    if not isinstance(obj, _Mapping):
        raise InvalidRegistration('registration %d: expect an object, got %r' % (index, obj))
    fields = dict(obj)
    if 'reward_address' not in fields:
        raise InvalidRegistration('registration %d: missing reward_address' % index)
    if 'delegations' not in fields:
        raise InvalidRegistration('registration %d: missing delegations' % index)
    if 'voting_power' in fields:
        voting_power = fields['voting_power']
    elif 'total_voting_power' in fields:
        voting_power = fields['total_voting_power']
    else:
        raise InvalidRegistration('registration %d: missing voting_power' % index)
    return VotingRegistration(
        stake_public_key=fields.get('stake_public_key', ''),
        reward_address=fields['reward_address'],
        voting_power=_unsigned(voting_power, 'voting_power', index),
        delegations=_decode_delegations(fields['delegations'], index),
        voting_purpose=_unsigned(
            fields.get('voting_purpose', CATALYST_VOTING_PURPOSE_TAG), 'voting_purpose', index
        ),
    )


class RawSnapshot:
    'ordered registrations, the input of a snapshot'

    def __init__(self, registrations=()):
        self.registrations = list(registrations)

    def __iter__(self):
        return iter(self.registrations)

    def __len__(self):
        return len(self.registrations)

    def __eq__(self, other):
        return isinstance(other, RawSnapshot) and self.registrations == other.registrations

    def __repr__(self):
        return 'RawSnapshot(%r)' % self.registrations

    @classmethod
    def from_json(cls, text):
        try:
            doc = json.loads(text, object_pairs_hook=_object_pairs)
        except json.JSONDecodeError as ex:
            raise InvalidRegistration('raw snapshot is not valid json: %s' % ex) from None
        if isinstance(doc, _Mapping) or not isinstance(doc, list):
            raise InvalidRegistration('raw snapshot must be a json array')
        return cls(_decode_registration(obj, i) for i, obj in enumerate(doc))

    @classmethod
    def load(cls, path):
        with open(path) as fp:
            return cls.from_json(fp.read())

    def to_json(self):
        return [registration_to_json(reg) for reg in self.registrations]


if __name__ == '__main__':
    import sys
    raw = RawSnapshot.load(sys.argv[1])
    print(json.dumps(raw.to_json(), indent=4))
