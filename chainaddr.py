#!/usr/bin/env python3
import enum

from bech32 import bech32_decode, bech32_encode, convertbits

ACCOUNT_KIND = 0x05
TEST_BIT = 0x80
PUBLIC_KEY_SIZE = 32


class Discrimination(enum.Enum):
    PRODUCTION = 'production'
    TEST = 'test'

    @property
    def prefix(self):
        'bech32 human readable part of addresses on this network'
        return 'ta' if self is Discrimination.TEST else 'ca'

    @classmethod
    def from_name(cls, name):
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).lower())
        except ValueError:
            raise ValueError('invalid discrimination: %r, expect production or test' % (name,)) from None


def account_address(public_key, discrimination=Discrimination.PRODUCTION):
    '''encode an account address for a 32 bytes public key
    :param public_key: raw public key bytes
    :param discrimination: Discrimination or its name'''
    discrimination = Discrimination.from_name(discrimination)
    public_key = bytes(public_key)
    if len(public_key) != PUBLIC_KEY_SIZE:
        raise ValueError('account public key must be %d bytes, got %d' % (PUBLIC_KEY_SIZE, len(public_key)))
    header = ACCOUNT_KIND | (TEST_BIT if discrimination is Discrimination.TEST else 0)
    data = convertbits(bytes([header]) + public_key, 8, 5)
    return bech32_encode(discrimination.prefix, data)


def decode_account_address(address):
    'return (discrimination, public key bytes) of a bech32 account address'
    hrp, data = bech32_decode(address)
    if hrp is None:
        raise ValueError('invalid bech32 address: %s' % address)
    raw = convertbits(data, 5, 8, False)
    if raw is None or len(raw) != PUBLIC_KEY_SIZE + 1:
        raise ValueError('invalid account address payload: %s' % address)
    header = raw[0]
    if header & ~TEST_BIT != ACCOUNT_KIND:
        raise ValueError('not an account address: %s' % address)
    discrimination = Discrimination.TEST if header & TEST_BIT else Discrimination.PRODUCTION
    if hrp != discrimination.prefix:
        raise ValueError('address prefix %s does not match %s discrimination' % (hrp, discrimination.value))
    return discrimination, bytes(raw[1:])


def encode(key, discrimination='production'):
    'hex public key to account address'
    if isinstance(key, int):
        # fire converts 0x prefixed hex to int
        key = '%064x' % key
    return account_address(bytes.fromhex(key), discrimination)


def decode(address):
    'account address to [discrimination, hex public key]'
    discrimination, public_key = decode_account_address(address)
    return [discrimination.value, public_key.hex()]


if __name__ == '__main__':
    import fire
    fire.Fire({'encode': encode, 'decode': decode})
