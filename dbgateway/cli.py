"""
Command line entry point.

    dbgateway [--log-level LEVEL] [--data-dir DIR] [--<id> <uri> ...] <command> [args]

Connections named on the command line are opened first, then every
connection saved in the store. Results are printed as JSON on stdout; logs
go to stderr.
"""

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

from .adapters import get_adapter
from .config import GatewayConfig, configure_logging
from .connections import ConnectionRegistry, ConnectionStore
from .ddl import SchemaCompareService
from .exceptions import GatewayError
from .migration import MigrationEngine
from .procedures import analyze_procedure_tables, parse_procedure_blocks
from .replication import ReplicationOrchestrator

logger = logging.getLogger(__name__)

GLOBAL_OPTIONS = ('--log-level', '--data-dir')

COMMANDS = (
    'connections', 'inspect', 'query', 'health', 'ddl', 'migrate', 'replicate',
    'save', 'remove', 'packages', 'procedures', 'source', 'errors', 'analyze',
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dbgateway',
        description='Multi-vendor database gateway: query, inspect, migrate and replicate',
    )
    commands = parser.add_subparsers(dest='command', required=True)

    commands.add_parser('connections', help='List active connections')

    inspect = commands.add_parser('inspect', help='List tables, or describe one table')
    inspect.add_argument('connection')
    inspect.add_argument('table', nargs='?')

    query = commands.add_parser('query', help='Run a statement')
    query.add_argument('connection')
    query.add_argument('sql')
    query.add_argument('--max-rows', type=int, default=None, help='Row cap (default DBGATEWAY_DEFAULT_MAX_ROWS)')
    query.add_argument('--no-limit', action='store_true', help='Run without a row cap (DDL)')

    health = commands.add_parser('health', help='Health check a connection')
    health.add_argument('connection')

    ddl = commands.add_parser('ddl', help='Generate DDL bringing target in line with source')
    ddl.add_argument('source')
    ddl.add_argument('target')
    ddl.add_argument('--include-destructive', action='store_true', help='Emit DROP statements uncommented')

    migrate = commands.add_parser('migrate', help='Copy table data from source to target')
    migrate.add_argument('source')
    migrate.add_argument('target')
    migrate.add_argument('tables', nargs='+')
    migrate.add_argument('--truncate-target', action='store_true', help='Accepted; not implemented yet')

    replicate = commands.add_parser('replicate', help='Create and copy every source table on target')
    replicate.add_argument('source')
    replicate.add_argument('target')

    save = commands.add_parser('save', help='Open and persist a connection')
    save.add_argument('connection')
    save.add_argument('uri')

    remove = commands.add_parser('remove', help='Forget a connection and close it')
    remove.add_argument('connection')

    packages = commands.add_parser('packages', help='List Oracle packages')
    packages.add_argument('connection')

    procedures = commands.add_parser('procedures', help='List procedures of an Oracle package')
    procedures.add_argument('connection')
    procedures.add_argument('package')

    for name, help_text in (
        ('source', 'Print Oracle object source'),
        ('errors', 'List Oracle compile errors'),
        ('analyze', 'Analyze table usage of Oracle object source'),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument('connection')
        sub.add_argument('object_name')
        sub.add_argument('--type', dest='object_type', default='PROCEDURE', help='PROCEDURE, FUNCTION, PACKAGE BODY, ...')

    return parser


def split_argv(argv: Sequence[str]) -> Tuple[List[str], List[str], dict]:
    """
    Split arguments into connection pairs, the command and global options.

    Returns:
        (connection_args, command_args, global_options)
    """
    options = {}
    connection_args: List[str] = []
    i = 0
    while i < len(argv) and argv[i] not in COMMANDS:
        if argv[i] in GLOBAL_OPTIONS and i + 1 < len(argv):
            options[argv[i][2:].replace('-', '_')] = argv[i + 1]
            i += 2
            continue
        connection_args.append(argv[i])
        i += 1
    return connection_args, list(argv[i:]), options


def to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(dataclasses.asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted(to_jsonable(v) for v in value)
    return value


def emit(value: Any) -> None:
    if isinstance(value, str):
        print(value)
    else:
        print(json.dumps(to_jsonable(value), indent=2, default=str))


async def run_command(args: argparse.Namespace, registry: ConnectionRegistry, config: GatewayConfig) -> Any:
    """Dispatch one parsed command; returns what should be printed."""
    command = args.command

    if command == 'connections':
        return [
            {
                'id': handle.id,
                'vendor': handle.vendor.value,
                'schema': handle.config.schema,
                'database': handle.config.database,
                'persisted': registry.is_persisted(handle.id),
            }
            for handle in registry.list()
        ]

    if command == 'save':
        handle = await registry.save(args.connection, args.uri)
        return {'id': handle.id, 'vendor': handle.vendor.value, 'saved': True}

    if command == 'remove':
        return {'id': args.connection, 'removed': await registry.remove(args.connection)}

    if command in ('ddl', 'migrate', 'replicate'):
        source = get_adapter(registry.lookup(args.source))
        target = get_adapter(registry.lookup(args.target))
        if command == 'ddl':
            service = SchemaCompareService(source, target)
            diff = await service.compare()
            return service.generate_ddl(diff, include_destructive=args.include_destructive)
        if command == 'migrate':
            entries = await MigrationEngine(source, target).migrate_data(args.tables, args.truncate_target)
            return [entry.to_dict() for entry in entries]
        report = await ReplicationOrchestrator(source, target).replicate_database()
        return str(report)

    adapter = get_adapter(registry.lookup(args.connection))

    if command == 'inspect':
        if not args.table:
            return await adapter.list_tables()
        return {
            'columns': await adapter.describe_table(args.table),
            'primary_keys': await adapter.list_primary_keys(args.table),
            'foreign_keys': await adapter.list_foreign_keys(args.table),
        }
    if command == 'query':
        max_rows = None if args.no_limit else (args.max_rows or config.default_max_rows)
        return await adapter.execute_query(args.sql, max_rows)
    if command == 'health':
        return await adapter.health_check()
    if command == 'packages':
        return await adapter.list_packages()
    if command == 'procedures':
        return await adapter.list_package_procedures(args.package)
    if command == 'source':
        return await adapter.get_source(args.object_name, args.object_type)
    if command == 'errors':
        return await adapter.get_compile_errors(args.object_name, args.object_type)
    if command == 'analyze':
        source_text = await adapter.get_source(args.object_name, args.object_type)
        return {
            'tables': analyze_procedure_tables(source_text),
            'blocks': parse_procedure_blocks(source_text),
        }

    raise ValueError(f"Unknown command: {command}")


async def _main(argv: Sequence[str]) -> int:
    connection_args, command_args, options = split_argv(argv)
    args = build_parser().parse_args(command_args)

    config = GatewayConfig()
    configure_logging(options.get('log_level'))
    data_dir = options.get('data_dir') or config.data_dir

    store = ConnectionStore(data_dir, config.encryption_key)
    registry = ConnectionRegistry(store)
    try:
        await registry.load(connection_args)
        emit(await run_command(args, registry, config))
        return 0
    except GatewayError as e:
        logger.error(f"❌ {e}")
        return 1
    except Exception as e:
        # Driver and validation errors from operations that propagate unwrapped
        logger.error(f"❌ {type(e).__name__}: {e}")
        logger.debug("Traceback for the failed command", exc_info=True)
        return 1
    finally:
        await registry.close_all()
        store.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    return asyncio.run(_main(sys.argv[1:] if argv is None else argv))
