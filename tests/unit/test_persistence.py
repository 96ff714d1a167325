import numpy as np
import pytest

from ffbpnet import InvalidArgumentError, Network, NetworkConfig
from ffbpnet.core import persistence


def _trained_network(seed=17):
    network = Network.from_counts(3, 4, 2, learn_rate=0.6, momentum=0.8, seed=seed)
    rng = np.random.default_rng(seed)
    for _ in range(25):
        network.train(rng.uniform(0.0, 1.0, size=3), rng.uniform(0.0, 1.0, size=2))
    return network


def test_export_layout_is_matrix_then_thresholds():
    network = _trained_network()
    flat = persistence.export_parameters(network)
    assert flat.shape == (network.weight_count + network.neuron_count,)
    assert np.array_equal(flat[: network.weight_count], network.weights)
    assert np.array_equal(flat[network.weight_count :], network.thresholds)


def test_import_into_fresh_instance_reproduces_predictions():
    original = _trained_network()
    fresh = Network(original.config, rng=np.random.default_rng(999))
    persistence.import_parameters(fresh, persistence.export_parameters(original))

    rng = np.random.default_rng(0)
    for _ in range(20):
        x = rng.uniform(-2.0, 2.0, size=3)
        assert original.predict(x).tobytes() == fresh.predict(x).tobytes()


def test_bytes_round_trip_is_bit_exact():
    original = _trained_network()
    payload = persistence.to_bytes(original)
    assert len(payload) == 8 * original.parameter_count

    fresh = Network(original.config, rng=np.random.default_rng(1))
    persistence.from_bytes(fresh, payload)
    assert persistence.to_bytes(fresh) == payload
    x = np.array([0.1, 0.7, 0.3])
    assert original.predict(x).tobytes() == fresh.predict(x).tobytes()


def test_file_round_trip(tmp_path):
    original = _trained_network()
    path = persistence.save(original, tmp_path / "nested" / "net.npz")

    restored = persistence.load(path)
    assert restored.config.input_count == 3
    assert restored.config.hidden_count == 4
    assert restored.config.output_count == 2
    assert restored.learn_rate == 0.6
    assert restored.momentum == 0.8
    x = np.array([0.9, 0.2, 0.4])
    assert original.predict(x).tobytes() == restored.predict(x).tobytes()


def test_import_keeps_training_state():
    network = _trained_network()
    momentum_state = network.weight_deltas
    persistence.import_parameters(network, np.zeros(network.parameter_count))
    assert np.array_equal(network.weight_deltas, momentum_state)
    assert network.predict([1.0, 1.0, 1.0]).tolist() == [0.5, 0.5]


def test_wrong_sizes_are_rejected():
    network = Network(NetworkConfig(2, 2, 1), rng=np.random.default_rng(0))
    with pytest.raises(InvalidArgumentError):
        persistence.import_parameters(network, np.zeros(network.parameter_count - 1))
    with pytest.raises(InvalidArgumentError):
        persistence.from_bytes(network, b"\x00" * 7)


def test_load_rejects_incomplete_checkpoint(tmp_path):
    path = tmp_path / "broken.npz"
    np.savez(path, params=np.zeros(4))
    with pytest.raises(KeyError):
        persistence.load(path)
