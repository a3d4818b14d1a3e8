import os.path
import re

from paver.tasks import task
from paver.easy import sh


def tell(x):
    print()
    print(("-"*10)+ str(x) + ("-"*10))
    print()

@task
def build(quiet=True):
    """ Builds the pssig distribution, ready to be uploaded to pypi. """
    tell("Build dist")
    sh('python setup.py sdist', capture=quiet)

@task
def test(quiet=False):
    """ Runs the unit tests and doctests of all pssig modules, with coverage. """
    tell("Run tests")
    sh('py.test -v --doctest-modules --cov=pssig --cov-report=term-missing pssig/*.py', capture=quiet)

@task
def upload(quiet=False):
    """ Uploads the latest distribution to pypi. """

    lib = open(os.path.join("pssig", "__init__.py")).read()
    v = re.findall("VERSION.*=.*['\"](.*)['\"]", lib)[0]

    tell("upload dist %s" % v)
    sh('git tag -a v%s -m "Distribution version v%s"' % (v, v))
    sh('python setup.py sdist upload', capture=quiet)
    tell('Remember to upload tags using "git push --tags"')

@task
def lint(quiet=False):
    """ Run the python linter on pssig, skipping the inline test functions. """
    tell("Run pylint on the library")
    sh('pylint --disable=missing-docstring,wrong-import-position pssig', capture=quiet)

@task
def wc(quiet=False):
    """ Count the pssig library and example code lines. """
    tell("Counting code lines")

    print("\nLibrary code:")
    sh('wc -l pssig/*.py', capture=quiet)

    print("\nExample code:")
    sh('wc -l examples/*.py', capture=quiet)
