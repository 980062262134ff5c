import pytest

from treefilter.config_loader import DEFAULTS, ConfigError, load_config, validate_config


def write(tmp_path, text):
    path = tmp_path / 'config.yml'
    path.write_text(text)
    return path


def test_load_config_fills_defaults(tmp_path):
    cfg = load_config(write(tmp_path, 'sources: [./data]\nextensions: [txt, md]\n'))

    assert cfg['sources'] == ['./data']
    assert cfg['extensions'] == ['txt', 'md']
    assert cfg['prefixes'] == []
    assert cfg['include_hidden'] is True
    assert cfg['checksum_algo'] is None
    assert set(cfg) == set(DEFAULTS)


def test_single_string_becomes_list(tmp_path):
    cfg = load_config(write(tmp_path, 'sources: ./data\nprefixes: prefix_\n'))

    assert cfg['sources'] == ['./data']
    assert cfg['prefixes'] == ['prefix_']


def test_sources_required(tmp_path):
    path = write(tmp_path, 'extensions: [txt]\n')

    with pytest.raises(ConfigError, match='source'):
        load_config(path)
    assert load_config(path, require_sources=False)['sources'] == []


def test_empty_file_is_empty_config(tmp_path):
    assert load_config(write(tmp_path, ''), require_sources=False) == DEFAULTS


@pytest.mark.parametrize(
    'raw, message',
    [
        ({'sources': ['a'], 'colour': 'red'}, 'Unknown config keys'),
        ({'sources': ['a'], 'extensions': {'txt': 1}}, 'extensions'),
        ({'sources': ['a'], 'extensions': [True]}, 'extensions'),
        ({'sources': ['a'], 'min_size': -1}, 'min_size'),
        ({'sources': ['a'], 'max_size': 'big'}, 'max_size'),
        ({'sources': ['a'], 'min_size': 10, 'max_size': 5}, 'larger'),
        ({'sources': ['a'], 'fail_fast': 'yes'}, 'fail_fast'),
        ({'sources': ['a'], 'checksum_algo': 'crc32'}, 'checksum'),
    ],
)
def test_invalid_values(raw, message):
    with pytest.raises(ConfigError, match=message):
        validate_config(raw)


def test_invalid_yaml(tmp_path):
    with pytest.raises(ConfigError, match='Invalid YAML'):
        load_config(write(tmp_path, 'sources: [unclosed\n'))


def test_top_level_must_be_mapping(tmp_path):
    with pytest.raises(ConfigError, match='mapping'):
        load_config(write(tmp_path, '- a\n- b\n'))


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match='Cannot read'):
        load_config(tmp_path / 'nope.yml')
