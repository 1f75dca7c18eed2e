"""Tests for coefficient validation and JSON config loading."""

import json

import pytest

from ldsi import (
    DEFAULT_CONFIG,
    CleanerConfig,
    LdsiCoefficients,
    LdsiConfigError,
    LdsiVersionError,
    Language,
    TopologyStrategy,
    VerdictThresholds,
    load_config,
)
from ldsi._config import config_from_dict


def _write(tmp_path, doc):
    path = tmp_path / "ldsi.json"
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def test_defaults():
    """No config path gives the library defaults."""
    assert load_config() is DEFAULT_CONFIG
    assert DEFAULT_CONFIG.coefficients == LdsiCoefficients(0.5, 0.3, 0.2)
    assert DEFAULT_CONFIG.thresholds == VerdictThresholds(0.3, 0.7, 1.2)
    assert DEFAULT_CONFIG.strategy is TopologyStrategy.ABSOLUTE_V2
    assert DEFAULT_CONFIG.clean is False


def test_load_full_config(tmp_path):
    """Every section of a config document is applied."""
    path = _write(tmp_path, {
        "version": "1.0",
        "coefficients": {"alpha": 0.4, "beta": 0.4, "gamma": 0.2},
        "thresholds": {"zombie": 0.2, "rebel": 0.6, "architect": 1.0},
        "strategy": "delta-v1",
        "clean": True,
        "cleaner": {"language": "french", "min_word_length": 3},
    })
    config = load_config(path)
    assert config.coefficients == LdsiCoefficients(0.4, 0.4, 0.2)
    assert config.thresholds.architect == 1.0
    assert config.strategy is TopologyStrategy.DELTA_V1
    assert config.clean is True
    assert config.cleaner.language is Language.FRENCH
    assert config.cleaner.min_word_length == 3


def test_partial_config_keeps_defaults(tmp_path):
    """Missing keys and sections keep their defaults."""
    config = load_config(_write(tmp_path, {"version": "1.0", "coefficients": {"gamma": 0.5}}))
    assert config.coefficients == LdsiCoefficients(0.5, 0.3, 0.5)
    assert config.thresholds == DEFAULT_CONFIG.thresholds


def test_wrong_version(tmp_path):
    """An unsupported config version is rejected."""
    with pytest.raises(LdsiVersionError):
        load_config(_write(tmp_path, {"version": "2.0"}))


def test_missing_file(tmp_path):
    """A missing config file is a config error."""
    with pytest.raises(LdsiConfigError):
        load_config(tmp_path / "absent.json")


def test_invalid_json(tmp_path):
    """A config that is not JSON is a config error."""
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(LdsiConfigError):
        load_config(path)


def test_unknown_key(tmp_path):
    """Unknown keys in a section are rejected."""
    with pytest.raises(LdsiConfigError):
        load_config(_write(tmp_path, {"version": "1.0", "coefficients": {"delta": 1.0}}))


def test_unknown_strategy(tmp_path):
    """An unknown strategy tag is a config error."""
    with pytest.raises(LdsiConfigError):
        load_config(_write(tmp_path, {"version": "1.0", "strategy": "v9"}))


def test_unordered_thresholds():
    """Thresholds must be strictly ascending."""
    with pytest.raises(LdsiConfigError):
        VerdictThresholds(zombie=0.7, rebel=0.3, architect=1.2)


def test_non_finite_coefficient():
    """NaN and infinite coefficients are rejected."""
    with pytest.raises(LdsiConfigError):
        LdsiCoefficients(alpha=float("nan"))
    with pytest.raises(LdsiConfigError):
        LdsiCoefficients(gamma=float("inf"))


def test_non_numeric_coefficient():
    """Strings and booleans are not coefficients."""
    with pytest.raises(LdsiConfigError):
        LdsiCoefficients(beta="0.3")
    with pytest.raises(LdsiConfigError):
        LdsiCoefficients(alpha=True)


def test_config_error_is_value_error():
    """Config errors can be caught as ValueError."""
    with pytest.raises(ValueError):
        LdsiCoefficients(alpha=float("nan"))


def test_unknown_stemmer(tmp_path):
    """An unknown Snowball algorithm is rejected when the config loads."""
    path = _write(tmp_path, {"version": "1.0", "clean": True, "cleaner": {"stemmer": "klingon"}})
    with pytest.raises(LdsiConfigError):
        load_config(path)


def test_known_stemmer():
    """A valid Snowball algorithm name is accepted."""
    config = config_from_dict({"version": "1.0", "cleaner": {"stemmer": "french"}})
    assert config.cleaner.stemmer == "french"


def test_bad_min_word_length():
    """min_word_length must be an integer of at least 1."""
    for value in ("x", 0, -2, 2.5, True):
        with pytest.raises(LdsiConfigError):
            config_from_dict({"version": "1.0", "cleaner": {"min_word_length": value}})


def test_bad_dynamic_threshold():
    """The dynamic stop word threshold must be a finite value in (0, 1]."""
    for value in (0.0, -0.1, 1.5, float("nan"), float("inf"), "0.01"):
        with pytest.raises(LdsiConfigError):
            CleanerConfig(dynamic_stopwords_threshold=value)
    assert CleanerConfig(dynamic_stopwords_threshold=1.0).dynamic_stopwords_threshold == 1.0


def test_unknown_cleaner_language(tmp_path):
    """An unknown cleaner language is a config error."""
    with pytest.raises(LdsiConfigError):
        load_config(_write(tmp_path, {"version": "1.0", "cleaner": {"language": "klingon"}}))
