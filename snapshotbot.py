#!/usr/bin/env python3
import sys
import json
import logging

import fire
import jsonpatch

from registration import RawSnapshot, normalize_voting_key
from settings import LOG_LEVEL, load_settings
from snapshot import Snapshot


def fix_voting_key(key):
    'fire convert 0x prefixed key to int automatically, fix it.'
    if isinstance(key, int):
        return '%064x' % key
    return key


def genesis_patch(snapshot, discrimination, genesis):
    'json patch appending the snapshot funds to the `initial` list of a block0 genesis'
    ops = []
    if 'initial' not in genesis:
        ops.append({'op': 'add', 'path': '/initial', 'value': []})
    ops.append({'op': 'add', 'path': '/initial/-', 'value': snapshot.block0_initial(discrimination)})
    return jsonpatch.JsonPatch(ops)


class CLI:
    def _settings(self, config=None, threshold=None, purpose=None, discrimination=None):
        return load_settings(
            config,
            stake_threshold=threshold,
            voting_purpose=purpose,
            discrimination=discrimination,
        )

    def _build(self, raw, cfg):
        raw_snapshot = RawSnapshot.load(raw)
        snapshot = Snapshot.from_raw_snapshot(raw_snapshot, cfg['stake_threshold'], cfg['voting_purpose'])
        print('Loaded %d registrations, %d voting keys, total voting power %d' % (
            len(raw_snapshot),
            len(list(snapshot.voting_keys())),
            snapshot.total_voting_power(),
        ), file=sys.stderr)
        return snapshot

    def build(self, raw, threshold=None, purpose=None, config=None):
        '''Build the snapshot of a raw snapshot file
        :param raw: Path of raw snapshot json
        :param threshold: Minimum voting power, [default: STAKE_THRESHOLD or 0]
        :param purpose: Voting purpose tag, [default: VOTING_PURPOSE or 0]
        :param config: Path of toml settings
        '''
        cfg = self._settings(config, threshold, purpose)
        return json.dumps(self._build(raw, cfg).to_json(), indent=4)

    def keys(self, raw, threshold=None, purpose=None, config=None):
        '''List voting keys of the snapshot'''
        cfg = self._settings(config, threshold, purpose)
        return '\n'.join(self._build(raw, cfg).voting_keys())

    def contributions(self, raw, key, threshold=None, purpose=None, config=None):
        '''Contributions to a voting key
        :param key: Hex encoded voting public key
        '''
        cfg = self._settings(config, threshold, purpose)
        contribs = self._build(raw, cfg).contributions_for_voting_key(
            normalize_voting_key(fix_voting_key(key))
        )
        return json.dumps([c._asdict() for c in contribs], indent=4)

    def initials(self, raw, threshold=None, purpose=None, discrimination=None, config=None):
        '''Block0 initial funds of the snapshot
        :param discrimination: Address discrimination. [production|test]
        '''
        cfg = self._settings(config, threshold, purpose, discrimination)
        funds = self._build(raw, cfg).to_block0_initials(cfg['discrimination'])
        return json.dumps([fund._asdict() for fund in funds], indent=4)

    def genesis(self, raw, template, threshold=None, purpose=None, discrimination=None,
                config=None, in_place=False):
        '''Add the snapshot funds to a block0 genesis
        :param template: Path of block0 genesis json
        :param in_place: Overwrite the template instead of printing
        '''
        cfg = self._settings(config, threshold, purpose, discrimination)
        snapshot = self._build(raw, cfg)
        with open(template) as fp:
            genesis = json.load(fp)
        genesis = genesis_patch(snapshot, cfg['discrimination'], genesis).apply(genesis)
        if in_place:
            with open(template, 'w') as fp:
                json.dump(genesis, fp, indent=4)
            print('Updated', template, file=sys.stderr)
            return None
        return json.dumps(genesis, indent=4)


if __name__ == '__main__':
    logging.basicConfig(level=LOG_LEVEL.upper())
    fire.Fire(CLI())
