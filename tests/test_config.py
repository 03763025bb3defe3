"""CompilerConfig 与全局配置测试"""
import logging

import pytest

from dbmesh_config_parser.config import (
    CompilerConfig, get_config, set_config, load_config_from_file, setup_logging_from_config
)


def test_defaults():
    config = CompilerConfig()
    assert config.validate_regex is True
    assert config.require_endpoints is False
    assert config.role_annotation_key == 'database-mesh.io/role'
    assert config.output_format == 'json'


def test_file_round_trip(tmp_path):
    path = str(tmp_path / 'config.json')
    config = CompilerConfig(require_endpoints=True, output_format='yaml', indent=4)
    config.to_file(path)
    assert CompilerConfig.from_file(path) == config


@pytest.mark.parametrize('kwargs', [{'output_format': 'xml'}, {'indent': -1}])
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        CompilerConfig(**kwargs)


def test_global_config():
    assert get_config() == CompilerConfig()
    custom = CompilerConfig(validate_regex=False)
    set_config(custom)
    assert get_config() is custom
    set_config(None)
    assert get_config().validate_regex is True


def test_load_config_from_file(tmp_path):
    path = str(tmp_path / 'config.json')
    CompilerConfig(indent=0).to_file(path)
    load_config_from_file(path)
    assert get_config().indent == 0


def test_setup_logging_from_config(tmp_path):
    log_file = tmp_path / 'compile.log'
    setup_logging_from_config(CompilerConfig(log_level='DEBUG', log_file=str(log_file)))
    try:
        assert logging.getLogger().level == logging.DEBUG
        logging.getLogger('dbmesh_config_parser').debug('编译开始')
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert '编译开始' in log_file.read_text(encoding='utf-8')
    finally:
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        root.setLevel(logging.WARNING)
