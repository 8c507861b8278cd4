"""Domain errors as click errors, tagged with their envelope status code."""

from __future__ import annotations

import click

from storefront.application.envelope import status_code_for
from storefront.domain.exceptions import DomainException


def command_error(exc: DomainException) -> click.ClickException:
    return click.ClickException(f"[{status_code_for(exc)}] {exc}")
