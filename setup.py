from setuptools import setup

setup(
    name='TUNoverTCP',
    version='1.0',
    packages=['TUNoverTCP'],
    license='',
    description='Launcher for the TUN over TCP VPN engine',
    entry_points={
        'console_scripts': [
            'tunnel-launcher = TUNoverTCP.launcher_main:start_main',
        ],
    },
    install_requires=[],
    extras_require={
        'test': ['pytest'],
    },
)
