import json

import pytest
import simplefix
from click.testing import CliRunner

import main
from src.fix_dict import dict_tool


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text(
        'logging:\n'
        f'  file: {tmp_path / "logs" / "fix_dict.log"}\n'
        '  level: WARNING\n'
        'output:\n'
        '  indent: 4\n'
    )
    return str(path)


@pytest.fixture
def runner():
    return CliRunner()


def test_load_config_defaults_when_missing(tmp_path):
    config = dict_tool.load_config(str(tmp_path / 'missing.yaml'))
    assert config == dict_tool.DEFAULT_CONFIG
    assert config is not dict_tool.DEFAULT_CONFIG


def test_load_config_merges_sections(config_path):
    config = dict_tool.load_config(config_path)
    assert config['output']['indent'] == 4
    assert config['logging']['level'] == 'WARNING'


def test_convert_writes_json(runner, config_path, sample_path, tmp_path):
    out = tmp_path / 'out' / 'FIX44.json'
    result = runner.invoke(main.cli, ['--config', config_path, 'convert', sample_path, '-o', str(out)])
    assert result.exit_code == 0, result.output
    text = out.read_text()
    data = json.loads(text)
    assert data['version'] == 'FIX.4.4'
    # indent from the config file
    assert '\n    "version"' in text


def test_run_convert_returns_json(sample_path):
    json_text, error = dict_tool.run_convert(sample_path, indent=None)
    assert error is None
    assert json.loads(json_text)['messages'][1]['msgType'] == 'D'


def test_convert_reports_error(runner, config_path, tmp_path):
    bad = tmp_path / 'bad.xml'
    bad.write_text('<fix minor="4"><fields/></fix>')
    result = runner.invoke(main.cli, ['--config', config_path, 'convert', str(bad)])
    assert result.exit_code == 1
    assert 'Could not determine FIX version' in result.output


def test_check_summary(runner, config_path, sample_path):
    result = runner.invoke(main.cli, ['--config', config_path, 'check', sample_path])
    assert result.exit_code == 0, result.output
    assert 'Version: FIX.4.4' in result.output
    assert 'Messages: 3' in result.output
    assert 'UnresolvedHeaderTrailerField' in result.output


def encode_order(pairs):
    msg = simplefix.FixMessage()
    msg.append_pair(8, 'FIX.4.4')
    msg.append_pair(35, 'D')
    for tag, value in pairs:
        msg.append_pair(tag, value)
    return msg.encode().decode().replace('\x01', '|')


def test_validate_msg_missing_required(runner, config_path, sample_path):
    raw = encode_order([(11, 'ORD_1'), (55, 'EUR/USD')])
    result = runner.invoke(main.cli, ['--config', config_path, 'validate-msg', sample_path, raw])
    assert result.exit_code == 1
    assert 'Required field Side(54) missing from NewOrderSingle' in result.output


def test_validate_msg_valid(runner, config_path, sample_path):
    raw = encode_order([(11, 'ORD_1'), (55, 'EUR/USD'), (54, '1')])
    result = runner.invoke(main.cli, ['--config', config_path, 'validate-msg', sample_path, raw])
    assert result.exit_code == 0, result.output
    assert 'Message valid' in result.output


def test_load_config_non_mapping_falls_back_to_defaults(tmp_path):
    path = tmp_path / 'list.yaml'
    path.write_text('- logging\n- output\n')
    assert dict_tool.load_config(str(path)) == dict_tool.DEFAULT_CONFIG


def test_convert_latin1_dictionary(runner, config_path, tmp_path):
    xml = ('<?xml version="1.0" encoding="ISO-8859-1"?>\n'
           '<fix major="4" minor="2"><fields>'
           '<field number="5001" name="Café" type="STRING"/></fields></fix>\n')
    src = tmp_path / 'latin1.xml'
    src.write_bytes(xml.encode('latin-1'))
    out = tmp_path / 'latin1.json'
    result = runner.invoke(main.cli, ['--config', config_path, 'convert', str(src), '-o', str(out)])
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding='utf-8'))
    assert data['fields'] == [{'tag': '5001', 'name': 'Café', 'type': 'STRING'}]


def test_convert_undecodable_file_reports_error(runner, config_path, tmp_path):
    src = tmp_path / 'bad-encoding.xml'
    src.write_bytes('<fix major="4" minor="2" name="Café"/>'.encode('latin-1'))
    result = runner.invoke(main.cli, ['--config', config_path, 'convert', str(src)])
    assert result.exit_code == 1
    assert 'Could not parse XML' in result.output
    assert not isinstance(result.exception, UnicodeDecodeError)
