"""Nox sessions for the provider test suite."""

import nox

nox.options.sessions = ["tests", "integration"]
nox.options.default_venv_backend = "uv"

PYTHONS = ["3.10", "3.11", "3.12", "3.13"]


@nox.session(python=PYTHONS)
def tests(session):
    """Run the unit tests, with Prometheus counters installed."""
    session.install(".[full,dev]")
    session.run("pytest", "tests/unit", "-q", "--no-cov", *session.posargs)


@nox.session(python=PYTHONS[-1])
def minimal(session):
    """Run the unit tests without optional extras."""
    session.install(".[dev]")
    session.run("pytest", "tests/unit", "-q", "--no-cov", *session.posargs)


@nox.session(python=PYTHONS[-1])
def integration(session):
    """Run the end-to-end tests through httpx with coverage."""
    session.install(".[full,dev]")
    session.run(
        "pytest",
        "tests/integration",
        "-q",
        "--cov=jsonrpc_http_provider",
        "--cov-report=term-missing",
        *session.posargs,
    )


@nox.session(python=PYTHONS[-1])
def type_check(session):
    """Run mypy type checking."""
    session.install(".[full,dev]")
    session.install("mypy")
    session.run("mypy", "src/jsonrpc_http_provider", *session.posargs)
