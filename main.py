# main.py
import sys

import click
from src.fix_dict import dict_tool
from src.fix_dict.errors import DictionaryError


@click.group()
@click.option('--config', 'config_path', default=dict_tool.CONFIG_FILE, show_default=True,
              help='Path to the YAML config file.')
@click.option('--log-level', default=None, help='Override the log level from the config.')
@click.pass_context
def cli(ctx, config_path, log_level):
    """
    FIX Data Dictionary Converter.

    Turns a QuickFIX-style XML data dictionary into normalized JSON
    describing the version, header/trailer layout, fields and messages.
    """
    config = dict_tool.load_config(config_path)
    if log_level:
        config['logging']['level'] = log_level
    dict_tool.setup_logging(config['logging'].get('file'), config['logging'].get('level', 'INFO'))
    ctx.obj = config


@cli.command()
@click.argument('dict_path', type=click.Path(exists=True, dir_okay=False))
@click.option('-o', '--output', 'out_path', default=None, help='Write JSON here instead of stdout.')
@click.option('--indent', default=None, type=int, help='JSON indent (overrides config).')
@click.pass_obj
def convert(config, dict_path, out_path, indent):
    """
    Convert a dictionary XML file to JSON.

    Example: python main.py convert dict/FIX44.xml -o out/FIX44.json
    """
    if indent is None:
        indent = config['output'].get('indent', 2)
    try:
        json_text, error = dict_tool.run_convert(dict_path, out_path, indent)
    except OSError as e:
        click.echo(f"An error occurred: {e}", err=True)
        sys.exit(1)
    if error:
        click.echo(error, err=True)
        sys.exit(1)
    if not out_path:
        click.echo(json_text)


@cli.command()
@click.argument('dict_path', type=click.Path(exists=True, dir_okay=False))
def check(dict_path):
    """
    Convert a dictionary and print a summary with any warnings.
    """
    try:
        lines, error = dict_tool.run_check(dict_path)
    except OSError as e:
        click.echo(f"An error occurred: {e}", err=True)
        sys.exit(1)
    if error:
        click.echo(error, err=True)
        sys.exit(1)
    for line in lines:
        click.echo(line)


@cli.command('validate-msg')
@click.argument('dict_path', type=click.Path(exists=True, dir_okay=False))
@click.argument('raw_message')
def validate_msg(dict_path, raw_message):
    """
    Check a '|' delimited FIX message for its required fields.

    Example: python main.py validate-msg dict/FIX44.xml "8=FIX.4.4|9=5|35=0|10=161|"
    """
    try:
        is_valid, reason = dict_tool.run_validate_message(dict_path, raw_message)
    except (DictionaryError, OSError) as e:
        click.echo(f"An error occurred: {e}", err=True)
        sys.exit(1)
    click.echo(reason)
    if not is_valid:
        sys.exit(1)


if __name__ == '__main__':
    cli()
