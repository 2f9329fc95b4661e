"""Useful tasks for use when developing the form entry project.

This uses the `Invoke` library."""
from pathlib import Path

from invoke import Context, task

PROJECT_DIR = Path(__file__).parent


@task
def test(c: Context, path="formentry", keyword=None, verbose=False):
    """Run the test suite"""
    cmd = f"pytest {path}"
    if keyword:
        cmd += f" -k {keyword}"
    if verbose:
        cmd += " -v"
    with c.cd(PROJECT_DIR):
        c.run(cmd, pty=True)


@task
def migrations(c: Context, check=False):
    """Make Django migrations, or check that none are missing"""
    cmd = "python manage.py makemigrations"
    if check:
        cmd += " --check --dry-run"
    with c.cd(PROJECT_DIR):
        c.run(cmd)
