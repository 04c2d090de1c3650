from setuptools import setup, find_packages

setup(
    name             = 'scam-detector',
    version          = '1.0.0',
    description      = 'Scam Detector — call log & SMS readers with a scam-likelihood heuristic',
    packages         = find_packages(exclude=['tests*']),
    install_requires = open('requirements.txt').read().splitlines(),
    extras_require   = {
        'test': ['pytest', 'httpx'],
    },
    entry_points     = {
        'console_scripts': [
            'scam-detector = scam_detector.cli:main',
        ],
    },
    python_requires  = '>=3.10',
    classifiers      = [
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
)
