"""Nox session definitions for ringwave quality gates."""

from __future__ import annotations

import nox

nox.options.sessions = ["lint", "typecheck", "tests"]


@nox.session
def lint(session: nox.Session) -> None:
    """Run ruff lint and format checks without mutating files."""
    session.install("ruff")
    session.run("ruff", "check", "src", "tests", "noxfile.py")
    session.run("ruff", "format", "--check", "src", "tests", "noxfile.py")


@nox.session(name="lint-fix")
def lint_fix(session: nox.Session) -> None:
    """Apply ruff fixes and formatting."""
    session.install("ruff")
    session.run("ruff", "check", "--fix", "src", "tests", "noxfile.py")
    session.run("ruff", "format", "src", "tests", "noxfile.py")


@nox.session
def typecheck(session: nox.Session) -> None:
    """Run mypy on the ringwave package."""
    session.install("mypy")
    session.install("-e", ".")
    session.run("mypy", "src/ringwave")


@nox.session
def tests(session: nox.Session) -> None:
    """Run the pytest suite against an editable install."""
    session.install("-e", ".[dev]")
    session.run("pytest", *session.posargs)


@nox.session
def snapshot(session: nox.Session) -> None:
    """Render a headless frame as an end-to-end smoke check."""
    session.install("-e", ".")
    session.run("ringwave-snapshot", "--frames", "3", "--log-file", "nox-snapshot.log")
