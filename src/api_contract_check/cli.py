"""CLI entry point for api-contract-check."""

import json
import logging
from pathlib import Path

import click

from api_contract_check.config import CheckConfig, ConfigError, load_config
from api_contract_check.logging_setup import setup_logging
from api_contract_check.parser.base import Operation
from api_contract_check.parser.swagger import ContractParseError, parse_openapi
from api_contract_check.verification.coordinator import ContractCoordinator, VerificationReport
from api_contract_check.verification.issue import IssueSeverity

logger = logging.getLogger(__name__)


def _parse_doc(file_path: Path) -> list[Operation]:
    """Parse an API contract, reporting unreadable documents as usage errors."""
    try:
        return parse_openapi(file_path)
    except ContractParseError as e:
        raise click.ClickException(f"Cannot parse {file_path}: {e}") from e


def _render_text(report: VerificationReport) -> str:
    lines = [issue.render() for issue in report.errors]
    lines += [issue.render() for issue in report.warnings]
    summary = report.summary()
    lines.append(f"{summary['errors']} error(s), {summary['warnings']} warning(s)")
    return "\n".join(lines)


@click.group()
def main():
    """API Contract Check — compare an API contract with its implementation."""
    pass


@main.command()
@click.pass_context
@click.argument("contract_path", type=click.Path(exists=True, path_type=Path))
@click.argument("implementation_path", type=click.Path(exists=True, path_type=Path))
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML check configuration.")
@click.option("--max-severity", default=None, type=click.Choice(["error", "warning"]), help="Severity ceiling for forward checks.")
@click.option("--no-reverse", is_flag=True, default=False, help="Skip checking the implementation against the contract.")
@click.option("--fail-on", default=None, type=click.Choice(["error", "warning", "never"]), help="Issue level that causes a non-zero exit.")
@click.option("--format", "fmt", default="text", type=click.Choice(["text", "json"]), help="Output format.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the report to this file.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def check(
    ctx: click.Context,
    contract_path: Path,
    implementation_path: Path,
    config_path: Path | None,
    max_severity: str | None,
    no_reverse: bool,
    fail_on: str | None,
    fmt: str,
    output: Path | None,
    verbose: bool,
):
    """Check an implementation-derived contract against the published contract."""
    setup_logging(verbose)
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    config = _apply_overrides(config, max_severity, no_reverse, fail_on)

    contract_ops = _parse_doc(contract_path)
    implementation_ops = _parse_doc(implementation_path)
    logger.info(f"Parsed {len(contract_ops)} contract and {len(implementation_ops)} implementation operations")

    try:
        coordinator = ContractCoordinator(config=config)
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    report = coordinator.verify(contract_ops, implementation_ops)

    if fmt == "json":
        result = json.dumps(report.to_dict(), indent=2)
    else:
        result = _render_text(report)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result + "\n", encoding="utf-8")
        click.echo(f"Report saved to {output}")
    else:
        click.echo(result)

    ctx.exit(report.exit_code(config.fail_on))


def _apply_overrides(config: CheckConfig, max_severity: str | None, no_reverse: bool, fail_on: str | None) -> CheckConfig:
    updates = {}
    if max_severity:
        updates["max_severity"] = IssueSeverity(max_severity.upper())
    if no_reverse:
        updates["check_reverse"] = False
    if fail_on:
        updates["fail_on"] = fail_on
    return config.model_copy(update=updates)
