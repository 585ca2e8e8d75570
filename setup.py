from setuptools import setup, find_packages
import peakram

setup(
    name='peakram',
    version=peakram.__version__,
    description='Measures the elapsed time, retained memory and peak memory of python code',
    packages=find_packages(include=['peakram', 'peakram.*']),
    python_requires='>=3.9',
    install_requires=[
        'click', 'termcolor>=2.1', 'ruamel.yaml', 'pandas', 'numpy', 'tabulate',
    ],
    extras_require={
        'test': ['pytest'],
    },

    entry_points='''
        [console_scripts]
        peakram=peakram.cli:launch_cli
    ''',
)
