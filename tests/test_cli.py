"""Tests for pva_sim.cli: command-line entry point."""

import pandas as pd
import pytest
import yaml

from pva_sim.cli import build_config, build_parser, main


@pytest.fixture
def base_yaml(tmp_path):
    path = tmp_path / "base.yaml"
    with open(path, 'w') as f:
        yaml.dump({
            'simulation': {'replicate_count': 40, 'year_count': 10},
            'extinction': {'threshold': 50},
        }, f)
    return path


class TestBuildConfig:
    def test_flags_override_yaml(self, base_yaml):
        args = build_parser().parse_args([
            'run', '--config', str(base_yaml), '--replicates', '7',
            '--threshold', '3', '--scenario', 'demographic',
        ])
        config = build_config(args)
        assert config.simulation.replicate_count == 7
        assert config.simulation.year_count == 10
        assert config.extinction.threshold == 3
        assert config.stochasticity.demographic is True

    def test_defaults_without_config(self):
        args = build_parser().parse_args(['run', '--years', '5'])
        config = build_config(args)
        assert config.simulation.year_count == 5
        assert config.simulation.replicate_count == 1000


class TestMain:
    def test_run_prints_probability(self, base_yaml, capsys):
        assert main(['run', '--config', str(base_yaml), '--seed', '1']) == 0
        out = capsys.readouterr().out
        assert "Quasi-extinction probability" in out
        assert "0.0000" in out

    def test_run_writes_csv(self, base_yaml, tmp_path):
        csv_path = tmp_path / "out.csv"
        assert main(['run', '--config', str(base_yaml), '--seed', '1',
                     '--csv', str(csv_path)]) == 0
        frame = pd.read_csv(csv_path)
        assert len(frame) == 40 * 10

    def test_run_writes_plot(self, base_yaml, tmp_path):
        png = tmp_path / "traj.png"
        assert main(['run', '--config', str(base_yaml), '--seed', '1',
                     '--plot', str(png)]) == 0
        assert png.exists()

    def test_compare(self, base_yaml, capsys):
        assert main(['compare', '--config', str(base_yaml), '--seed', '2',
                     'deterministic', 'demographic']) == 0
        out = capsys.readouterr().out
        assert 'deterministic' in out and 'demographic' in out

    def test_negative_threshold_exit_code(self, base_yaml, capsys):
        assert main(['run', '--config', str(base_yaml), '--threshold', '-1']) == 2
        assert "threshold" in capsys.readouterr().err

    def test_missing_config_exit_code(self, tmp_path, capsys):
        assert main(['run', '--config', str(tmp_path / 'missing.yaml')]) == 2

    def test_unknown_compare_scenario(self, base_yaml):
        assert main(['compare', '--config', str(base_yaml), 'bogus']) == 2

    def test_negative_seed_exit_code(self, capsys):
        assert main(['run', '--replicates', '5', '--seed', '-1']) == 2
        assert "seed" in capsys.readouterr().err

    def test_scenario_warning_emitted_once(self, capsys):
        with pytest.warns(UserWarning) as record:
            assert main(['run', '--replicates', '5', '--years', '5', '--seed', '1',
                         '--initial', '10.5', '--scenario', 'demographic']) == 0
        floor_warnings = [w for w in record if "floor" in str(w.message)]
        assert len(floor_warnings) == 1
