"""Tests for logging setup."""

import json
import logging
import logging.handlers
import sys

from codelens.core.logger import LoggerManager, StructuredFormatter


def make_record(message='hello', *args, **attributes):
    record = logging.LogRecord('codelens.client', logging.WARNING, __file__, 12,
                               message, args, None)
    record.__dict__.update(attributes)
    return record


class TestStructuredFormatter:
    """Test cases for StructuredFormatter."""

    def test_json_output_with_context(self):
        record = make_record("Failed to analyze %s", 'a.py', file='a.py')

        entry = json.loads(StructuredFormatter().format(record))

        assert entry['level'] == 'WARNING'
        assert entry['logger'] == 'codelens.client'
        assert entry['message'] == 'Failed to analyze a.py'
        assert entry['location'].endswith(':12')
        assert entry['context'] == {'file': 'a.py'}

    def test_context_can_be_disabled(self):
        entry = json.loads(StructuredFormatter(include_extra=False).format(
            make_record(file='a.py')
        ))

        assert 'context' not in entry

    def test_unencodable_values_are_stringified(self):
        entry = json.loads(StructuredFormatter().format(make_record(files={'a.py'})))

        assert entry['context'] == {'files': "{'a.py'}"}

    def test_exception_is_included(self):
        try:
            raise ValueError("bad payload")
        except ValueError:
            record = logging.LogRecord('codelens', logging.ERROR, __file__, 1, "boom", (),
                                       sys.exc_info())

        entry = json.loads(StructuredFormatter().format(record))

        assert 'ValueError: bad payload' in entry['exception']


class TestLoggerManager:
    """Test cases for LoggerManager."""

    def test_console_only_by_default(self, test_config):
        manager = LoggerManager(test_config)

        assert manager.root.name == 'codelens'
        assert manager.root.level == logging.ERROR
        assert not manager.root.propagate
        assert len(manager.root.handlers) == 1

    def test_level_override(self, test_config):
        LoggerManager(test_config, level_override='debug')

        assert logging.getLogger('codelens').level == logging.DEBUG

    def test_unknown_level_falls_back_to_warning(self, test_config):
        test_config['logging']['level'] = 'CHATTY'

        assert LoggerManager(test_config).level == logging.WARNING

    def test_non_mapping_logging_section_uses_defaults(self):
        manager = LoggerManager({'logging': 'verbose'})

        assert manager.level == logging.WARNING
        assert len(manager.root.handlers) == 1

    def test_setup_does_not_stack_handlers(self, test_config):
        LoggerManager(test_config)
        LoggerManager(test_config)

        assert len(logging.getLogger('codelens').handlers) == 1

    def test_component_loggers(self, test_config):
        manager = LoggerManager(test_config)

        assert manager.get_logger('discovery') is logging.getLogger('codelens.discovery')

    def test_file_handler_writes_json(self, test_config, temp_dir):
        log_file = temp_dir / 'logs' / 'codelens.log'
        test_config['logging']['file'] = str(log_file)
        manager = LoggerManager(test_config)

        logging.getLogger('codelens.scan_engine').error("Scan failed", extra={'files': 3})
        manager.shutdown()

        entry = json.loads(log_file.read_text(encoding='utf-8').splitlines()[0])
        assert entry['logger'] == 'codelens.scan_engine'
        assert entry['message'] == 'Scan failed'
        assert entry['context'] == {'files': 3}
        assert manager.root.handlers == []

    def test_file_handler_rotation_size(self, test_config, temp_dir):
        test_config['logging']['file'] = str(temp_dir / 'codelens.log')
        test_config['logging']['max_file_size'] = '2KB'
        manager = LoggerManager(test_config)

        rotating = [handler for handler in manager.handlers
                    if isinstance(handler, logging.handlers.RotatingFileHandler)]
        assert rotating[0].maxBytes == 2048
        assert rotating[0].backupCount == 1
        manager.shutdown()
