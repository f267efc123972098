import pytest

from abs_harmonization.cleaning import DEFAULT_MISSING_CODES, NA_LABELS
from abs_harmonization.config import (
    DataPaths,
    HarmonizationConfig,
    WAVE_REGISTRY,
    get_wave_config,
    list_waves,
    load_config,
)
from abs_harmonization.data import Wave


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text(
        "paths:\n"
        f"  raw_data: {tmp_path / 'raw'}\n"
        f"  output: {tmp_path / 'out'}\n"
        "harmonization:\n"
        "  missing_codes: [0, 99]\n"
        "  extra_missing_labels: ['Not asked']\n"
        "  waves: [W6, W2]\n"
        "  verbose: false\n"
    )
    return path


def test_data_paths_expand_user_and_vars(monkeypatch):
    monkeypatch.setenv('ABS_DATA', '/data/abs')
    paths = DataPaths(raw_data_dir='$ABS_DATA/raw', output_dir='~/out')

    assert str(paths.raw_data_dir) == '/data/abs/raw'
    assert '~' not in str(paths.output_dir)
    assert paths.registry_path is None


def test_data_paths_from_yaml(config_file, tmp_path):
    paths = DataPaths.from_yaml(config_file)

    assert paths.raw_data_dir == tmp_path / 'raw'
    assert paths.output_dir == tmp_path / 'out'


def test_data_paths_missing_keys(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text("paths:\n  raw_data: /x\n")
    with pytest.raises(KeyError, match="output"):
        DataPaths.from_yaml(path)


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        DataPaths.from_yaml(tmp_path / 'nope.yaml')


def test_validate_reports_issues_without_raising(tmp_path):
    paths = DataPaths(
        raw_data_dir=tmp_path / 'does_not_exist',
        output_dir=tmp_path / 'out',
        registry_path=tmp_path / 'missing.csv',
    )
    issues = paths.validate()

    assert any('raw_data_dir' in issue for issue in issues)
    assert any('registry_path' in issue for issue in issues)
    assert (tmp_path / 'out').exists()


def test_harmonization_config_defaults():
    config = HarmonizationConfig()

    assert config.missing_codes == DEFAULT_MISSING_CODES
    assert config.missing_labels == NA_LABELS
    assert config.label_cleaning is True
    assert config.waves is None


def test_harmonization_config_from_yaml(config_file):
    config = HarmonizationConfig.from_yaml(config_file)

    assert config.missing_codes == (0, 99)
    assert config.extra_missing_labels == ('Not asked',)
    assert config.waves == [Wave.W2, Wave.W6]
    assert config.verbose is False


def test_load_config(config_file):
    config = load_config(config_file)
    assert set(config) == {'paths', 'harmonization'}
    assert isinstance(config['paths'], DataPaths)


def test_wave_registry():
    assert list_waves() == [Wave.W2, Wave.W3, Wave.W4, Wave.W5, Wave.W6]
    assert get_wave_config('w5').country_col == 'COUNTRY'
    assert not get_wave_config('W6').has_country_filter()
    assert get_wave_config('W2').has_country_filter()
    assert set(WAVE_REGISTRY) == set(Wave)


def test_missing_wave_folders(tmp_path):
    (tmp_path / 'Wave2').mkdir()
    (tmp_path / 'Wave6').mkdir()
    paths = DataPaths(raw_data_dir=tmp_path, output_dir=tmp_path / 'out')

    assert paths.wave_dir('W4') == tmp_path / 'Wave4'
    assert paths.missing_wave_folders() == [Wave.W3, Wave.W4, Wave.W5]
    assert paths.missing_wave_folders(['W6', 'W2']) == []
