from setuptools import setup

setup(
    name='ircbot',
    version='0.3.0',
    packages=[
        'ircbot',
        'ircbot.features',
        'ircbot.features.rfc1459',
        'ircbot.utils'
    ],
    python_requires='>=3.8',
    install_requires=[],
    extras_require={
        'tests': ['pytest', 'pytest-asyncio'],   # collect and run tests
        'coverage': 'pytest-cov'                 # get test case coverage
    },
    entry_points={
        'console_scripts': [
            'ircbot = ircbot.utils.run:main'
        ]
    },

    keywords='irc bot ctcp ident library python3',
    description='A small asyncio IRC bot client: line parsing, event dispatch, CTCP and ident.',
    license='BSD',

    zip_safe=True,
    test_suite='tests'
)
