"""
Command-line entry point: ``injoy-register``.
"""
import logging
import os
from typing import Optional

import typer

from .config import AptosConfig
from .exceptions import InJoyError
from .register import DEFAULT_FUND_AMOUNT, DEFAULT_MAX_GAS_AMOUNT, run
from .version import __version__

LOG_LEVEL_ENV = "INJOY_LOG"

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="injoy-register",
    help="Fund an account and register it for its InJoyCoin.",
    add_completion=False,
)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger from ``level`` or $INJOY_LOG (default WARNING)"""
    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)-5s %(name)s > %(message)s",
    )


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"injoy-register {__version__}")
        raise typer.Exit()


@app.command()
def register(
    profile: str = typer.Option("default", "--profile", help="Profile name in the config file"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to the profile config file"),
    amount: int = typer.Option(DEFAULT_FUND_AMOUNT, "--amount", help="Faucet amount in octas"),
    max_gas: int = typer.Option(DEFAULT_MAX_GAS_AMOUNT, "--max-gas", help="Maximum gas units"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Confirmation timeout in seconds"),
    skip_fund: bool = typer.Option(False, "--skip-fund", help="Do not call the faucet"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level (overrides $INJOY_LOG)"),
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Print version and exit"
    ),
) -> None:
    """
    Fund the profile's account, then register it for its InJoyCoin.
    """
    setup_logging(log_level)

    try:
        loaded = AptosConfig.load_profile(profile, config)
        result = run(
            loaded,
            amount=amount,
            max_gas_amount=max_gas,
            timeout=timeout,
            fund=not skip_fund,
        )
    except InJoyError as e:
        logger.debug("Registration failed", exc_info=True)
        typer.echo(f"Error: {type(e).__name__}: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Registered {result.address} for {result.coin_type}")
    typer.echo(f"Transaction hash: {result.record.hash}")
    typer.echo(f"Version: {result.record.version}")


def main() -> None:
    app(prog_name="injoy-register")


if __name__ == "__main__":
    main()
