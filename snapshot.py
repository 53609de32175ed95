#!/usr/bin/env python3
import logging
from collections import namedtuple

from chainaddr import Discrimination, account_address
from registration import (
    CATALYST_VOTING_PURPOSE_TAG, Legacy, Weighted, normalize_voting_key,
)

logger = logging.getLogger(__name__)

# contribution to a voting key for some registration
KeyContribution = namedtuple('KeyContribution', ['reward_address', 'value'])

InitialFund = namedtuple('InitialFund', ['address', 'value'])


def distribute(reg):
    '''split the voting power of a registration into (voting_key, value) pairs

    Weighted delegations give every entry but the last its floor share, entries
    whose share rounds to zero are skipped. The last entry takes what is left,
    unless nothing is left.
    '''
    delegations = reg.delegations
    voting_power = reg.voting_power
    if isinstance(delegations, Legacy):
        return [(delegations.voting_key, voting_power)]
    if not isinstance(delegations, Weighted):
        raise ValueError('unknown delegations of %s: %r' % (reg.reward_address, delegations))
    if not delegations.entries:
        raise ValueError('registration of %s has no delegation' % reg.reward_address)
    if any(weight <= 0 for _, weight in delegations.entries):
        raise ValueError('registration of %s has a non positive delegation weight' % reg.reward_address)

    total_weight = delegations.total_weight()
    *others, (last_key, _) = delegations.entries
    shares = []
    others_total = 0
    for key, weight in others:
        value = voting_power * weight // total_weight
        if value:
            shares.append((key, value))
            others_total += value
    if others_total != voting_power:
        shares.append((last_key, voting_power - others_total))
    return shares


class Snapshot:
    def __init__(self, inner, stake_threshold, voting_purpose=CATALYST_VOTING_PURPOSE_TAG):
        self._inner = {key: list(inner[key]) for key in sorted(inner)}
        self._stake_threshold = stake_threshold
        self._voting_purpose = voting_purpose

    @classmethod
    def from_raw_snapshot(cls, raw_snapshot, stake_threshold, voting_purpose=CATALYST_VOTING_PURPOSE_TAG):
        '''build the snapshot of registrations at or above the stake threshold
        :param raw_snapshot: iterable of VotingRegistration
        :param stake_threshold: minimum voting power, inclusive
        :param voting_purpose: only registrations for this purpose count'''
        acc = {}
        total = below_threshold = other_purpose = 0
        for reg in raw_snapshot:
            total += 1
            if reg.voting_power < stake_threshold:
                below_threshold += 1
                continue
            if reg.voting_purpose != voting_purpose:
                other_purpose += 1
                continue
            for key, value in distribute(reg):
                acc.setdefault(normalize_voting_key(key), []).append(KeyContribution(reg.reward_address, value))
        logger.debug(
            'snapshot of %d registrations: %d below threshold %d, %d for other voting purpose',
            total, below_threshold, stake_threshold, other_purpose,
        )
        return cls(acc, stake_threshold, voting_purpose)

    def __eq__(self, other):
        if not isinstance(other, Snapshot):
            return NotImplemented
        return (self._inner, self._stake_threshold, self._voting_purpose) == \
            (other._inner, other._stake_threshold, other._voting_purpose)

    def __repr__(self):
        return 'Snapshot(keys=%d, stake_threshold=%d, voting_purpose=%d)' % (
            len(self._inner), self._stake_threshold, self._voting_purpose)

    def stake_threshold(self):
        return self._stake_threshold

    def voting_purpose(self):
        return self._voting_purpose

    def voting_keys(self):
        return iter(self._inner)

    def contributions_for_voting_key(self, voting_key):
        'contributions in registration order, empty if the key has none'
        return list(self._inner.get(normalize_voting_key(voting_key), []))

    def total_voting_power(self):
        return sum(c.value for contribs in self._inner.values() for c in contribs)

    def to_block0_initials(self, discrimination):
        '''one fund per voting key holding the sum of its contributions
        :param discrimination: Discrimination or its name'''
        discrimination = Discrimination.from_name(discrimination)
        return [
            InitialFund(
                account_address(bytes.fromhex(key), discrimination),
                sum(c.value for c in contribs),
            )
            for key, contribs in self._inner.items()
        ]

    def block0_initial(self, discrimination):
        'block0 genesis `initial` entry'
        return {
            'fund': [
                {'address': fund.address, 'value': fund.value}
                for fund in self.to_block0_initials(discrimination)
            ]
        }

    def to_json(self):
        return {
            'stake_threshold': self._stake_threshold,
            'voting_purpose': self._voting_purpose,
            'voting_keys': {
                key: [{'reward_address': c.reward_address, 'value': c.value} for c in contribs]
                for key, contribs in self._inner.items()
            },
        }
