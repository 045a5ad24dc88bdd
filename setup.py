# /setup.py
"""
Setup configuration for composectl.
"""
from setuptools import setup, find_namespace_packages
from pathlib import Path

# Read version from composectl.py
with open('composectl/composectl.py', 'r') as f:
    for line in f:
        if line.startswith('VERSION'):
            version = line.split('=')[1].strip().strip('"\'')
            break

# Read README
readme = Path(__file__).parent / 'README.md'
long_description = readme.read_text() if readme.exists() else ''

setup(
    name='composectl',
    version=version,
    description='Restart compose stacks, clear container conflicts and discover published ports',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=find_namespace_packages(include=['composectl', 'composectl.*'],
                                     exclude=['composectl.tests', 'composectl.tests.*']),
    include_package_data=True,
    python_requires='>=3.8',
    install_requires=[
        'click>=8.1.7',
        'rich>=13.7.0',
        'pyyaml>=6.0.1',
        'python-dotenv>=1.0.0'
    ],
    extras_require={
        'test': [
            'pytest>=7.4.0'
        ]
    },
    entry_points={
        'console_scripts': [
            'composectl=composectl.composectl:cli'
        ]
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: MIT License',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Topic :: Software Development :: Build Tools',
        'Topic :: System :: Installation/Setup',
    ],
    keywords='docker compose, containers, ports, scaffolding',
    zip_safe=False,
)
