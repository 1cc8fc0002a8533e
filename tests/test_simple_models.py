"""
Unit tests for the constant, white noise and single-stream random walk models.
"""

import pytest


class TestConstantModel:
    """Test the base contract."""

    def test_defaults(self, t0):
        from gnss_stochastic.models import ConstantModel, StochasticModel

        for model in (StochasticModel(), ConstantModel()):
            model.prepare(t0)
            assert model.get_phi() == 1.0
            assert model.get_q() == 0.0

    def test_to_dict_names_model(self):
        from gnss_stochastic.models import ConstantModel

        assert ConstantModel().to_dict() == {'model': 'ConstantModel'}


class TestWhiteNoiseModel:
    """Test white noise: Phi = 0, Q = sigma**2."""

    def test_default_sigma(self):
        from gnss_stochastic.models import WhiteNoiseModel

        model = WhiteNoiseModel()
        assert model.get_q() == 300000.0 ** 2
        assert model.get_phi() == 0.0

    def test_q_independent_of_history(self, t0):
        from gnss_stochastic.models import WhiteNoiseModel

        model = WhiteNoiseModel(sigma=2.0)
        for k in range(5):
            model.prepare(t0 + 30.0 * k)
            assert model.get_q() == 4.0
            assert model.get_phi() == 0.0

    def test_set_sigma(self):
        from gnss_stochastic.models import WhiteNoiseModel

        model = WhiteNoiseModel(sigma=2.0).set_sigma(3.0)
        assert model.get_q() == 9.0

    def test_negative_sigma_rejected(self):
        from gnss_stochastic.models import WhiteNoiseModel

        with pytest.raises(ValueError):
            WhiteNoiseModel(sigma=-1.0)


class TestRandomWalkModel:
    """Test the single-stream random walk."""

    def test_q_scales_with_elapsed_time(self, t0):
        from gnss_stochastic.models import RandomWalkModel

        model = RandomWalkModel(qprime=1e-4)
        model.prepare(t0)
        model.prepare(t0 + 30.0)

        assert model.get_q() == pytest.approx(1e-4 * 30.0)
        assert model.get_phi() == 1.0

    def test_first_epoch_gives_huge_q(self, t0):
        """No previous epoch: interval measured from BEGINNING_OF_TIME."""
        from gnss_stochastic.interfaces.gnss_types import Epoch
        from gnss_stochastic.models import RandomWalkModel

        model = RandomWalkModel()
        model.prepare(t0)

        assert model.get_q() == pytest.approx(9.0e10 * (t0 - Epoch.BEGINNING_OF_TIME))
        assert model.get_q() > 1e19

    def test_repeated_epoch_gives_zero(self, t0):
        from gnss_stochastic.models import RandomWalkModel

        model = RandomWalkModel(qprime=1e-4)
        model.prepare(t0)
        model.prepare(t0 + 30.0)
        model.prepare(t0 + 30.0)

        assert model.get_q() == 0.0

    def test_get_q_is_stable_between_prepares(self, t0):
        from gnss_stochastic.models import RandomWalkModel

        model = RandomWalkModel(qprime=2e-3)
        model.prepare(t0)
        model.prepare(t0 + 10.0)

        values = [model.get_q() for _ in range(3)]
        assert values == [pytest.approx(0.02)] * 3
        assert [model.get_phi() for _ in range(3)] == [1.0, 1.0, 1.0]

    def test_previous_time_constructor(self, t0):
        from gnss_stochastic.models import RandomWalkModel

        model = RandomWalkModel(qprime=1.0, previous_time=t0)
        model.prepare(t0 + 5.0)
        assert model.get_q() == pytest.approx(5.0)

    def test_set_previous_time(self, t0):
        from gnss_stochastic.models import RandomWalkModel

        model = RandomWalkModel().set_qprime(2.0).set_previous_time(t0)
        model.prepare(t0 + 3.0)
        assert model.get_q() == pytest.approx(6.0)

    def test_out_of_order_clamps_to_zero(self, t0):
        from gnss_stochastic.models import RandomWalkModel

        model = RandomWalkModel(qprime=1.0)
        model.prepare(t0 + 60.0)
        model.prepare(t0)

        assert model.get_q() == 0.0

    def test_out_of_order_raise(self, t0):
        from gnss_stochastic.models import EpochOrderError, OutOfOrderPolicy, RandomWalkModel

        model = RandomWalkModel(qprime=1.0, out_of_order=OutOfOrderPolicy.RAISE)
        model.prepare(t0 + 60.0)

        with pytest.raises(EpochOrderError):
            model.prepare(t0)

    def test_negative_qprime_rejected(self):
        from gnss_stochastic.models import RandomWalkModel

        with pytest.raises(ValueError):
            RandomWalkModel(qprime=-1.0)

    def test_out_of_order_reset_restarts_from_beginning(self, t0):
        """A reset global random walk measures from BEGINNING_OF_TIME again."""
        from gnss_stochastic.interfaces.gnss_types import Epoch
        from gnss_stochastic.models import OutOfOrderPolicy, RandomWalkModel

        model = RandomWalkModel(qprime=1.0, out_of_order=OutOfOrderPolicy.RESET)
        model.prepare(t0 + 60.0)
        model.prepare(t0)

        assert model.get_q() == pytest.approx(t0 - Epoch.BEGINNING_OF_TIME)
        assert model.record.previous_time == t0

        model.prepare(t0 + 30.0)
        assert model.get_q() == pytest.approx(30.0)

    def test_set_current_time_is_overwritten_by_prepare(self, t0):
        from gnss_stochastic.models import RandomWalkModel

        model = RandomWalkModel(qprime=1.0, previous_time=t0)
        model.set_current_time(t0 + 1000.0)
        assert model.record.current_time == t0 + 1000.0

        model.prepare(t0 + 10.0)
        assert model.get_q() == pytest.approx(10.0)
        assert model.record.current_time == t0 + 10.0


class TestEpochRecord:
    """Test the shared epoch bookkeeping."""

    def test_reset_before_sentinel_terminates(self):
        """An epoch earlier than BEGINNING_OF_TIME resets once and yields zero."""
        from gnss_stochastic.interfaces.gnss_types import Epoch
        from gnss_stochastic.models import EpochRecord, OutOfOrderPolicy

        record = EpochRecord()
        early = Epoch.BEGINNING_OF_TIME - 10.0

        dt = record.advance(early, OutOfOrderPolicy.RESET, seed_first=False)
        assert dt == 0.0
        assert record.previous_time == early

    def test_reset_with_seeding_gives_zero(self, t0):
        from gnss_stochastic.models import EpochRecord, OutOfOrderPolicy

        record = EpochRecord(previous_time=t0 + 60.0)
        assert record.advance(t0, OutOfOrderPolicy.RESET) == 0.0
        assert record.previous_time == t0
