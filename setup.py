from setuptools import setup

setup(
    name='voting-snapshot',
    version='1.0',
    description='Build voting power snapshots and block0 initial funds from voter registrations.',
    py_modules=[
        'chainaddr',
        'registration',
        'settings',
        'snapshot',
        'snapshotbot',
    ],
    python_requires='>=3.7',
    install_requires=[
        'PyNaCl>=1.3.0',
        'python-decouple>=3.3',
        'toml>=0.10.0',
        'fire>=0.2.1',
        'jsonpatch>=1.24',
        'bech32==1.2.0',
    ],
    extras_require={
        'test': ['pytest'],
    },
    scripts=[
        'snapshotbot.py',
    ]
)
