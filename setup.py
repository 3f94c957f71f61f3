# type: ignore
from setuptools import find_packages, setup, Command

# Get VERSION constant from flagengine.version - we can't simply import that module because
# flagengine/__init__.py imports modules that require dependencies we may not have loaded yet.
# Based on https://packaging.python.org/guides/single-sourcing-package-version/
version_module_globals = {}
with open('./flagengine/version.py') as f:
    exec(f.read(), version_module_globals)
flagengine_version = version_module_globals['VERSION']


def parse_requirements(filename):
    """ load requirements from a pip requirements file """
    with open(filename) as f:
        lineiter = (line.strip() for line in f)
        return [line for line in lineiter if line and not line.startswith("#")]


install_reqs = parse_requirements('requirements.txt')
test_reqs = parse_requirements('test-requirements.txt')


class PyTest(Command):
    user_options = []

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    def run(self):
        import sys
        import subprocess
        errno = subprocess.call([sys.executable, '-m', 'pytest', 'flagengine/testing'])
        raise SystemExit(errno)


setup(
    name='flagengine',
    version=flagengine_version,
    packages=find_packages(include=['flagengine', 'flagengine.*']),
    description='Deterministic feature-flag evaluation engine with segment matching and percentage rollouts',
    long_description='Deterministic feature-flag evaluation engine with segment matching and percentage rollouts',
    install_requires=install_reqs,
    python_requires='>=3.8',
    classifiers=[
        'Intended Audience :: Developers',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development',
        'Topic :: Software Development :: Libraries',
    ],
    extras_require={
        "test": test_reqs,
    },
    cmdclass={'test': PyTest},
)
