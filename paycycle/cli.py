# paycycle/cli.py
import json
import logging
import os

import click
from dotenv import load_dotenv

from paycycle.config import load_config
from paycycle.errors import PaycycleError
from paycycle.manual import import_records, load_records
from paycycle.outputs import get_output
from paycycle.report import format_report
from paycycle.store import create_store
from paycycle.web import API_PREFIX, make_server, record_payload, transaction_payload

logger = logging.getLogger(__name__)

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _echo_json(payload):
    click.echo(json.dumps(payload, indent=2, default=str))


@click.group()
@click.option(
    '--config', 'config_path',
    default='config.yaml',
    type=click.Path(dir_okay=False),
    help='Path to config.yaml (defaults are used if it does not exist)'
)
@click.option(
    '--data-file', 'data_file',
    default=None,
    type=click.Path(dir_okay=False),
    help='JSON data file (overrides config)'
)
@click.option(
    '--storage', 'storage',
    default=None,
    type=click.Choice(['json', 'sqlite']),
    help='Storage backend (overrides config)'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file with PAYCYCLE_* settings'
)
@click.option(
    '--log-level', 'log_level',
    default=None,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help='Logging level (default: $PAYCYCLE_LOG_LEVEL or WARNING)'
)
@click.pass_context
def main(ctx, config_path, data_file, storage, env_file, log_level):
    """
    Track transactions per user and report them by pay-period week
    (Friday through Thursday, clipped at month boundaries).
    """
    if env_file:
        load_dotenv(env_file)

    level = (log_level or os.getenv('PAYCYCLE_LOG_LEVEL') or 'WARNING').upper()
    if level not in LOG_LEVELS:
        raise click.BadParameter(
            f"{level!r} is not one of {', '.join(LOG_LEVELS)}",
            param_hint='PAYCYCLE_LOG_LEVEL'
        )
    logging.basicConfig(level=level)

    cfg = load_config(config_path)
    if data_file:
        cfg['data_file'] = data_file
    if storage:
        cfg['storage'] = storage

    ctx.obj = {'config': cfg, 'store': create_store(cfg)}


@main.command()
@click.argument('user_id')
@click.argument('amount')
@click.option('--description', default='', help='Transaction description')
@click.option('--date', 'tx_date', default=None, help='ISO date or datetime (default: now)')
@click.pass_obj
def add(obj, user_id, amount, description, tx_date):
    """Add a transaction for USER_ID and save the store."""
    store = obj['store']
    try:
        tx = store.add(user_id, amount, description, tx_date)
        store.persist()
    except PaycycleError as e:
        raise click.ClickException(str(e))
    _echo_json(transaction_payload(tx))


@main.command('list')
@click.argument('user_id', required=False)
@click.pass_obj
def list_transactions(obj, user_id):
    """List USER_ID's transactions by date, or every record if omitted."""
    store = obj['store']
    try:
        if user_id is None:
            payload = [record_payload(rec) for rec in store.get_data()]
        else:
            payload = [transaction_payload(tx) for tx in store.get_by_user_id(user_id)]
    except PaycycleError as e:
        raise click.ClickException(str(e))
    _echo_json(payload)


@main.command()
@click.argument('user_id')
@click.argument('transaction_id')
@click.pass_context
def find(ctx, user_id, transaction_id):
    """Show a single transaction."""
    try:
        tx = ctx.obj['store'].find(user_id, transaction_id)
    except PaycycleError as e:
        raise click.ClickException(str(e))
    if tx is None:
        click.echo("Transaction not found", err=True)
        ctx.exit(1)
    _echo_json(transaction_payload(tx))


@main.command('sum')
@click.argument('user_id')
@click.pass_obj
def sum_transactions(obj, user_id):
    """Print the sum of USER_ID's transactions."""
    try:
        total = obj['store'].get_sum_by_user_id(user_id)
    except PaycycleError as e:
        raise click.ClickException(str(e))
    _echo_json({'userId': user_id, 'sum': float(total)})


@main.command()
@click.argument('user_id')
@click.option(
    '--include-open-period/--exclude-open-period',
    default=None,
    help='Also report the most recent, still-open week (default from config)'
)
@click.option(
    '--output', 'output_format',
    default=None,
    type=click.Choice(['csv', 'excel']),
    help='Also export the report to a CSV or Excel file'
)
@click.pass_obj
def report(obj, user_id, include_open_period, output_format):
    """Print USER_ID's pay-period report."""
    try:
        buckets = obj['store'].get_report_by_user_id(user_id, include_open_period)
    except PaycycleError as e:
        raise click.ClickException(str(e))
    _echo_json(format_report(buckets))

    if output_format:
        outputter = get_output(output_format, obj['config'])
        out_path = outputter.write(user_id, buckets)
        click.echo(f"Written {len(buckets)} week(s) to {out_path}", err=True)


@main.command('import')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def import_file(obj, path):
    """Import user records from a YAML or JSON file and save the store."""
    store = obj['store']
    try:
        count = import_records(store, load_records(path))
        store.persist()
    except (PaycycleError, ValueError) as e:
        raise click.ClickException(str(e))
    click.echo(f"Imported {count} transaction(s) from {path}.")


@main.command()
@click.confirmation_option(prompt='Delete every stored transaction?')
@click.pass_obj
def clear(obj):
    """Delete every stored transaction."""
    try:
        obj['store'].clear_data()
    except PaycycleError as e:
        raise click.ClickException(str(e))
    click.echo("Cleared all transactions.")


@main.command()
@click.option('--host', default=None, help='Host to bind (default from config)')
@click.option('--port', default=None, type=int, help='Port to bind (default from config)')
@click.pass_obj
def serve(obj, host, port):
    """Serve the JSON API over HTTP."""
    web_cfg = obj['config']['web']
    host = host or web_cfg['host']
    port = port or web_cfg['port']
    store = obj['store']
    server = make_server(store, host, port, autosave=web_cfg.get('autosave', True))
    click.echo(f"paycycle API running at http://{host}:{port}{API_PREFIX}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        click.echo("Shutting down.")
    finally:
        server.server_close()
        store.close()
        logger.info("Server stopped")
