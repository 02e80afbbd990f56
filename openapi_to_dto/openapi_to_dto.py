import logging

import click

from .errors import OpenApiToDtoError
from .pipeline import GeneratorConfig, GeneratorOrchestrator, load_document


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option(
    "--template-dir",
    "-t",
    default=None,
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Directory with templates overriding the bundled ones",
)
@click.option("--entity-suffix", default=None, type=str, help="Suffix of generated entity names (default: Dto)")
@click.option(
    "--strict-cycles",
    is_flag=True,
    default=False,
    help="Fail when entities depend on each other cyclically instead of breaking the cycle",
)
@click.option("--no-controllers", is_flag=True, default=False, help="Do not write the abstract controllers")
@click.option("--no-services", is_flag=True, default=False, help="Do not write the service stubs")
@click.option(
    "--include-error-types",
    is_flag=True,
    default=False,
    help="Put non-2xx response types in controller return types",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug details")
@click.argument("specs_dir", type=click.Path(file_okay=False, resolve_path=True))
@click.argument("output_dir", type=click.Path(file_okay=False, resolve_path=True))
def openapi_to_dto(
    config,
    template_dir,
    entity_suffix,
    strict_cycles,
    no_controllers,
    no_services,
    include_error_types,
    verbose,
    specs_dir,
    output_dir,
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if config is not None:
            config = GeneratorConfig.from_dict(load_document(config))
        else:
            config = GeneratorConfig()

        # CLI flags override the config file
        if template_dir is not None:
            config.template_dir = template_dir
        if entity_suffix is not None:
            config.entity_suffix = entity_suffix
        if strict_cycles:
            config.strict_cycles = True
        if no_controllers:
            config.generate_controllers = False
        if no_services:
            config.generate_services = False
        if include_error_types:
            config.include_error_types = True

        written = GeneratorOrchestrator(specs_dir, output_dir, config).generate()
    except OpenApiToDtoError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Generated {len(written)} file(s) in {output_dir}")
