import asyncio
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from cmdletgen.codegen.file_writer import FileWriter
from cmdletgen.codegen.project import ProjectAssembler
from cmdletgen.codegen.schema import SchemaLoader
from cmdletgen.codegen.state import State
from cmdletgen.config import MappingConfigurationSource, get_config
from cmdletgen.exceptions import CmdletGenError, GenerationAbortedError

console = Console()
app = typer.Typer(
    name='cmdletgen',
    help='Generate PowerShell module projects from OpenAPI specifications',
    no_args_is_help=True,
)


@app.command()
def generate(
    config: Annotated[
        str | None,
        typer.Option('--config', '-c', help='Path to configuration file (YAML)'),
    ] = None,
) -> None:
    """Generate a module project from configuration.

    If no config file is specified, looks for cmdletgen.yaml, cmdletgen.yml
    or a [tool.cmdletgen] table in pyproject.toml in the current directory.

    Examples:
        cmdletgen generate
        cmdletgen generate --config widgets.yaml
    """
    try:
        settings = get_config(config)

        with Progress(
            SpinnerColumn(),
            TextColumn('[progress.description]{task.description}'),
            console=console,
        ) as progress:
            task = progress.add_task(
                f'Generating project for {settings.input} in {settings.output}...',
                total=None,
            )

            model = SchemaLoader().load(settings.input)
            state = State(MappingConfigurationSource(settings.values), model)
            project = asyncio.run(ProjectAssembler(state).init())
            written = project.emit(FileWriter(settings.output))

            progress.update(task, description=f'Project generated for {settings.input}!')

        console.print('[dim]Generated files:[/dim]')
        for path in written:
            console.print(f'  - {path}')

    except GenerationAbortedError as e:
        console.print(f'[red]Generation aborted with {len(e.errors)} error(s):[/red]')
        for error in e.errors:
            console.print(f'  - {error}')
        raise typer.Exit(1)
    except CmdletGenError as e:
        console.print(f'[red]Error:[/red] {e}')
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show the version of cmdletgen."""
    try:
        console.print(f'cmdletgen version: {package_version("cmdletgen")}')
    except PackageNotFoundError:
        console.print('cmdletgen version: unknown')


if __name__ == '__main__':
    app()
