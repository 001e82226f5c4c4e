import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]


def _install(session: nox.Session) -> None:
    """Install the project with all test extras into the nox virtualenv."""
    session.run(
        "poetry",
        "install",
        "--all-extras",
        external=True,
    )


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest")


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no infrastructure required)."""
    _install(session)
    session.run(
        "pytest",
        "tests/reconciliation/domain/",
        "tests/shared/domain/",
        "tests/notifications/domain/",
        "tests/payments/domain/",
    )


@nox.session(python=PYTHON_VERSIONS[-1])
def webhook_flow(session: nox.Session) -> None:
    """Run the webhook pipeline, endpoint and scenario tests."""
    _install(session)
    session.run(
        "pytest",
        "tests/reconciliation/application/",
        "tests/reconciliation/integration/",
        "tests/reconciliation/bdd/",
    )
