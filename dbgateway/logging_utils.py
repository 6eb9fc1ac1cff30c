"""
Logging utility functions for structured logging
"""
import logging
import time
from contextlib import asynccontextmanager, contextmanager

# Get loggers for different parts of the gateway
adapter_logger = logging.getLogger('dbgateway.adapters')
migration_logger = logging.getLogger('dbgateway.migration')
connection_logger = logging.getLogger('dbgateway.connections')
app_logger = logging.getLogger('dbgateway')


def log_with_context(logger, level, message, **context):
    """
    Log a message with additional context fields

    Args:
        logger: The logger instance to use
        level: Log level (INFO, ERROR, WARNING, etc.)
        message: The log message
        **context: Additional context fields (connection_id, table_name, etc.)

    Example:
        log_with_context(
            migration_logger,
            'INFO',
            'Batch inserted',
            connection_id='warehouse',
            table_name='ORDERS',
            rows=1000
        )
    """
    extra = {k: v for k, v in context.items() if v is not None}
    logger.log(getattr(logging, level.upper()), message, extra=extra)


def _log_start(logger, operation_name, context):
    log_with_context(
        logger,
        'INFO',
        f'{operation_name} started',
        operation=operation_name,
        **context
    )


def _log_success(logger, operation_name, start_time, context):
    duration = time.time() - start_time
    log_with_context(
        logger,
        'INFO',
        f'{operation_name} completed successfully',
        operation=operation_name,
        duration=duration,
        status='success',
        **context
    )


def _log_failure(logger, operation_name, start_time, error, context):
    duration = time.time() - start_time
    log_with_context(
        logger,
        'ERROR',
        f'{operation_name} failed: {str(error)}',
        operation=operation_name,
        duration=duration,
        status='failed',
        error_type=type(error).__name__,
        error_message=str(error),
        **context
    )


@contextmanager
def log_operation(logger, operation_name, **context):
    """
    Context manager to log the start, end, and duration of an operation

    Example:
        with log_operation(connection_logger, 'store_open', data_dir='/srv'):
            store = ConnectionStore('/srv')
    """
    start_time = time.time()
    _log_start(logger, operation_name, context)

    try:
        yield
        _log_success(logger, operation_name, start_time, context)
    except Exception as e:
        _log_failure(logger, operation_name, start_time, e, context)
        raise


@asynccontextmanager
async def alog_operation(logger, operation_name, **context):
    """
    Async counterpart of log_operation for coroutine bodies

    Example:
        async with alog_operation(migration_logger, 'replicate_database', source='ora', target='pg'):
            report = await orchestrator.replicate_database()
    """
    start_time = time.time()
    _log_start(logger, operation_name, context)

    try:
        yield
        _log_success(logger, operation_name, start_time, context)
    except Exception as e:
        _log_failure(logger, operation_name, start_time, e, context)
        raise
