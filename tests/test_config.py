"""
Unit tests for TOML configuration and the inspection CLI.
"""

import json

import pytest


class TestLoadConfig:
    """Test configuration loading."""

    def test_defaults_without_path(self):
        from gnss_stochastic.config import load_config

        config = load_config(None)
        assert config['general']['out_of_order'] == 'clamp'
        assert set(config['models']) == {'tropo', 'iono', 'rec_bias', 'ambiguity'}

    def test_missing_file_falls_back_to_defaults(self, tmp_path):
        from gnss_stochastic.config import default_config, load_config

        assert load_config(str(tmp_path / 'missing.toml')) == default_config()

    def test_load_toml(self, tmp_path):
        from gnss_stochastic.config import load_config

        path = tmp_path / 'stochastic.toml'
        path.write_text(
            '[general]\n'
            'out_of_order = "raise"\n'
            '\n'
            '[models.tropo]\n'
            'type = "tropo_random_walk"\n'
            'qprime = 1.0e-7\n'
        )

        config = load_config(str(path))
        assert config['general']['out_of_order'] == 'raise'
        assert config['models']['tropo']['qprime'] == 1.0e-7


class TestBuildModels:
    """Test model construction from configuration."""

    def test_default_model_set(self):
        from gnss_stochastic.config import build_models, default_config
        from gnss_stochastic.models import (
            IonoRandomWalkModel, PhaseAmbiguityModel, RecBiasRandomWalkModel,
            TropoRandomWalkModel,
        )

        models = build_models(default_config())
        assert isinstance(models['tropo'], TropoRandomWalkModel)
        assert isinstance(models['iono'], IonoRandomWalkModel)
        assert isinstance(models['rec_bias'], RecBiasRandomWalkModel)
        assert isinstance(models['ambiguity'], PhaseAmbiguityModel)

    def test_each_build_gives_fresh_instances(self):
        from gnss_stochastic.config import build_models, default_config

        first = build_models(default_config())
        second = build_models(default_config())
        assert first['tropo'] is not second['tropo']

    def test_parameters_applied(self):
        from datetime import datetime, timezone
        from gnss_stochastic.config import build_models
        from gnss_stochastic.interfaces.gnss_types import Epoch, TypeID
        from gnss_stochastic.models import OutOfOrderPolicy

        config = {
            'general': {'out_of_order': 'reset'},
            'models': {
                'iono': {
                    'type': 'iono_random_walk',
                    'qprime': 2.0e-3,
                    'sampling': 3600.0,
                    'initial_time': datetime(2024, 3, 1, tzinfo=timezone.utc),
                },
                'amb': {
                    'type': 'phase_ambiguity',
                    'sigma': 10.0,
                    'watch_sat_arc': False,
                    'cs_flag_type': 'CSL1',
                },
                'clock': {'type': 'white_noise', 'sigma': 3.0},
            },
        }

        models = build_models(config)
        iono = models['iono']
        assert iono.qprime == 2.0e-3
        assert iono.sampling == 3600.0
        assert iono.initial_time == Epoch.from_datetime(datetime(2024, 3, 1, tzinfo=timezone.utc))
        assert iono.out_of_order is OutOfOrderPolicy.RESET

        amb = models['amb']
        assert amb.get_cs_flag_type() is TypeID.CSL1
        assert amb.watch_sat_arc is False
        assert amb.variance == 100.0

        assert models['clock'].get_q() == 9.0

    def test_per_model_policy_overrides_general(self):
        from gnss_stochastic.config import create_model
        from gnss_stochastic.models import OutOfOrderPolicy

        model = create_model('tropo_random_walk', {'out_of_order': 'raise'}, out_of_order='clamp')
        assert model.out_of_order is OutOfOrderPolicy.RAISE

    def test_iso_string_epoch(self):
        from gnss_stochastic.config import create_model
        from gnss_stochastic.interfaces.gnss_types import Epoch
        from datetime import datetime, timezone

        model = create_model('iono_random_walk', {'initial_time': '2024-03-01T00:00:00Z'})
        assert model.initial_time == Epoch.from_datetime(datetime(2024, 3, 1, tzinfo=timezone.utc))

    def test_unknown_type_rejected(self):
        from gnss_stochastic.config import build_models

        with pytest.raises(ValueError, match='Unknown stochastic model type'):
            build_models({'models': {'x': {'type': 'gauss_markov'}}})

    def test_missing_type_rejected(self):
        from gnss_stochastic.config import build_models

        with pytest.raises(ValueError, match="has no 'type'"):
            build_models({'models': {'x': {'qprime': 1.0}}})

    def test_unknown_parameter_rejected(self):
        from gnss_stochastic.config import create_model

        with pytest.raises(ValueError, match='Invalid parameters'):
            create_model('white_noise', {'qprime': 1.0})

    def test_invalid_value_rejected(self):
        from gnss_stochastic.config import create_model

        with pytest.raises(ValueError):
            create_model('rec_bias_random_walk', {'qprime': -1.0})


class TestMain:
    """Test the inspection CLI."""

    def test_prints_default_models(self, capsys):
        from gnss_stochastic.main import main

        assert main([]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output['tropo']['model'] == 'TropoRandomWalkModel'
        assert output['tropo']['qprime'] == 5.0e-8

    def test_single_model(self, capsys):
        from gnss_stochastic.main import main

        assert main(['--model', 'ambiguity']) == 0
        output = json.loads(capsys.readouterr().out)
        assert list(output) == ['ambiguity']

    def test_unknown_model_fails(self):
        from gnss_stochastic.main import main

        assert main(['--model', 'nope']) == 1

    def test_invalid_config_fails(self, tmp_path):
        from gnss_stochastic.main import main

        path = tmp_path / 'bad.toml'
        path.write_text('[models.x]\ntype = "kalman"\n')
        assert main(['--config', str(path)]) == 1

    def test_malformed_toml_fails(self, tmp_path):
        from gnss_stochastic.main import main

        path = tmp_path / 'broken.toml'
        path.write_text('[models.x\ntype = "tropo_random_walk"\n')
        assert main(['--config', str(path)]) == 1
