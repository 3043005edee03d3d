"""Sesiones de QA locales para el backend del dashboard."""

from __future__ import annotations

import nox

SOURCE_DIRS = ("api", "domain", "infrastructure", "services", "shared", "tests")

nox.options.reuse_existing_virtualenvs = True
nox.options.sessions = ("lint", "typecheck", "tests", "security")


def _install_project(session: nox.Session, *extra: str) -> None:
    """Instala el proyecto con sus extras de test y las herramientas pedidas."""

    session.install("-e", ".[test]")
    if extra:
        session.install(*extra)


@nox.session
def lint(session: nox.Session) -> None:
    """Ejecuta flake8 sobre los módulos principales."""

    _install_project(session, "flake8>=7.0.0")
    session.run("flake8", *SOURCE_DIRS)


@nox.session
def typecheck(session: nox.Session) -> None:
    """Valida los tipos usando mypy."""

    _install_project(session, "mypy>=1.11.0")
    session.run("mypy", *SOURCE_DIRS)


@nox.session
def tests(session: nox.Session) -> None:
    """Ejecuta la suite de pytest con cobertura."""

    _install_project(session)
    session.run(
        "pytest",
        *(f"--cov={name}" for name in SOURCE_DIRS[:-1]),
        "--cov-report=term-missing",
        *session.posargs,
    )


@nox.session
def security(session: nox.Session) -> None:
    """Ejecuta verificaciones de seguridad con bandit y pip-audit."""

    _install_project(session, "bandit>=1.7.9", "pip-audit>=2.7.3")
    session.run("bandit", "-q", "-r", "api", "domain", "infrastructure", "services", "shared")
    session.run("pip-audit")
