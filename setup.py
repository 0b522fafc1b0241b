from setuptools import setup


def readme ():
    try:
        with open('README.rst') as f:
            return f.read()
    except IOError:
        return ''


setup(
    name='liftchain',
    packages=['liftchain'],
    version='1.0.0',
    description='liftchain - genome coordinate liftover with UCSC chain files',
    long_description=readme(),
    license='',
    package_data={
        'liftchain': ['liftchain.yml']
    },
    entry_points={
        'console_scripts': [
            'liftchain=liftchain.lc:main',
        ]
    },
    install_requires=[
        'numpy',
        'oyaml',
        'chardet>=3.0.4',
        ],
    extras_require={
        'test': ['pytest'],
    },
    python_requires='>=3.11',
)
