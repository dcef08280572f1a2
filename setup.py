"""
Setup script for Runner Analytics
Run: pip install -e .[test]
"""

from setuptools import find_packages, setup

setup(
    name='runner-analytics',
    version='1.0.0',
    description='Metrics, trends and forecasts for a date,person,miles running log',
    package_dir={'': 'src'},
    packages=find_packages('src'),
    python_requires='>=3.9',
    install_requires=[
        'pandas>=2.0',
        'python-dateutil>=2.8',
        'numpy>=1.23',
    ],
    extras_require={
        'test': ['pytest>=7'],
    },
    entry_points={
        'console_scripts': [
            'runner-analytics=runner_analytics.cli:main',
        ],
    },
)
