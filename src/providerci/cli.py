# cli.py
from __future__ import annotations

import sys
from pathlib import Path

import click

from providerci import settings
from providerci.config import list_providers
from providerci.dag import check_workflow
from providerci.errors import GeneratorError, OptionsValidationError, UnknownProviderError
from providerci.model import Workflow
from providerci.provider import build_provider_files
from providerci.ui.console import Console, get_console, set_console
from providerci.writer import write_provider_files


def resolve_providers(names: tuple[str, ...], all_providers: bool, providers_dir: Path) -> list[str]:
    """
    Decide which providers to generate.

    Raises:
        SystemExit: If nothing was requested or nothing was found
    """
    console = get_console()

    if names and all_providers:
        console.print_error(
            "Conflicting arguments",
            "Pass provider names or --all, not both.",
        )
        sys.exit(2)

    if all_providers:
        found = list_providers(providers_dir)
        if not found:
            console.print_error(
                "No providers found",
                f"No */{settings.CONFIG_FILE} under {providers_dir}",
                suggestion="Point at the providers directory:\n  providerci generate --all --providers-dir path/to/providers",
            )
            sys.exit(1)
        return found

    if not names:
        console.print_error(
            "No provider given",
            "Name at least one provider to generate.",
            suggestion="providerci generate aws-native\n  providerci generate --all",
        )
        sys.exit(2)

    return list(names)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """providerci: generate CI workflows and release configs for native providers."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.argument("providers", nargs=-1)
@click.option("--all", "all_providers", is_flag=True, default=False, help="Generate every provider under --providers-dir")
@click.option(
    "--providers-dir",
    default=settings.PROVIDERS_DIR,
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding <provider>/config.yaml",
)
@click.option(
    "--out-dir",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Output root; files land in <out-dir>/<provider>/ (defaults to <providers-dir>/<provider>/repo)",
)
@click.option("--check/--no-check", default=False, help="Verify every job dependency resolves before writing")
@click.pass_context
def generate(ctx, providers, all_providers, providers_dir, out_dir, check):
    """Generate workflow files for one or more providers."""
    console = get_console()
    names = resolve_providers(providers, all_providers, providers_dir)

    results: dict[str, str] = {}
    for name in names:
        try:
            files = build_provider_files(name, providers_dir)

            if check:
                for f in files:
                    if isinstance(f.data, Workflow):
                        stages = check_workflow(f.data)
                        console.print_check_passed(f.path, len(stages))

            target = out_dir / name if out_dir is not None else providers_dir / name / "repo"
            console.print_generation_started(name, len(files), str(target))
            for path in write_provider_files(files, target):
                console.print_file_written(str(path))
            results[name] = "ok"

        except UnknownProviderError as e:
            console.print_error(
                "Unknown provider",
                e.message,
                details=[f"looked for {e.details['path']}"],
                suggestion="List known providers:\n  providerci list",
            )
            results[name] = "failed"
        except OptionsValidationError as e:
            console.print_error(f"Invalid config for {name}", e.message)
            console.print_validation_errors(name, e.details.get("errors") or [e.details])
            if console.debug:
                console.print_exception(e)
            results[name] = "failed"
        except GeneratorError as e:
            console.print_error(f"Generation failed for {name}", str(e))
            if console.debug:
                console.print_exception(e)
            results[name] = "failed"
        except Exception as e:
            console.print_exception(e)
            results[name] = "failed"

    console.print_results(results)
    if any(v == "failed" for v in results.values()):
        sys.exit(1)


@cli.command(name="list")
@click.option(
    "--providers-dir",
    default=settings.PROVIDERS_DIR,
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
)
def list_command(providers_dir):
    """List providers that have a config file."""
    console = get_console()
    for name in list_providers(providers_dir):
        console.print_info(name)


if __name__ == "__main__":
    cli()
