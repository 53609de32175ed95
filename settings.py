#!/usr/bin/env python3
'''
Snapshot settings, later sources win:

- defaults
- environment variables or `.env` (STAKE_THRESHOLD, VOTING_PURPOSE, DISCRIMINATION)
- `[snapshot]` section of a toml file
- explicit overrides
'''
import toml
from decouple import config

from chainaddr import Discrimination
from registration import CATALYST_VOTING_PURPOSE_TAG

LOG_LEVEL = config('LOG_LEVEL', 'WARNING')


def load_settings(path=None, **overrides):
    '''resolve snapshot settings
    :param path: toml file with a [snapshot] section, optional'''
    cfg = {
        'stake_threshold': config('STAKE_THRESHOLD', 0, cast=int),
        'voting_purpose': config('VOTING_PURPOSE', CATALYST_VOTING_PURPOSE_TAG, cast=int),
        'discrimination': config('DISCRIMINATION', 'production'),
    }
    if path is not None:
        cfg.update(toml.load(path).get('snapshot', {}))
    cfg.update((k, v) for k, v in overrides.items() if v is not None)

    unknown = set(cfg) - {'stake_threshold', 'voting_purpose', 'discrimination'}
    if unknown:
        raise ValueError('unknown snapshot settings: %s' % ', '.join(sorted(unknown)))
    cfg['stake_threshold'] = int(cfg['stake_threshold'])
    cfg['voting_purpose'] = int(cfg['voting_purpose'])
    if cfg['stake_threshold'] < 0:
        raise ValueError('stake threshold must not be negative: %d' % cfg['stake_threshold'])
    if cfg['voting_purpose'] < 0:
        raise ValueError('voting purpose must not be negative: %d' % cfg['voting_purpose'])
    cfg['discrimination'] = Discrimination.from_name(cfg['discrimination'])
    return cfg
