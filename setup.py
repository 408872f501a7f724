from setuptools import setup

# Read version from rip/VERSION
with open('rip/VERSION') as f:
    VERSION = f.read().strip()

setup(
    name='rip-ports',
    version=VERSION,
    description='Interactive curses tool that lists listening ports and kills the owning process',
    long_description=open('README.md', encoding='utf-8').read(),
    long_description_content_type='text/markdown',
    license='MIT',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console :: Curses',
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: System :: Networking :: Monitoring',
    ],
    python_requires='>=3.7',
    packages=['rip'],
    package_data={'rip': ['VERSION']},
    install_requires=[
        'psutil',
    ],
    entry_points={
        'console_scripts': [
            'rip=rip:cli_entry',
        ],
    },
)
