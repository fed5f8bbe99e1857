import numpy as np
import pytest

from ffnet.core.activations import HIDDEN, OUTPUT, CustomActivation
from ffnet.core.network import NeuralNet, build_network
from ffnet.core.structure import build_topology
from ffnet.core.types import Batch
from ffnet.errors import WeightShapeError


def _topology(layers=(3, 4, 2), hidden="hyperbolicTangent", output="sigmoid", **kwargs):
    params = dict(batch_size=4, learning_rate=0.5, momentum=0.0)
    params.update(kwargs)
    return build_topology(
        list(layers),
        hidden_activation=HIDDEN.get(hidden),
        output_activation=OUTPUT.get(output),
        **params,
    )


def test_random_init_is_seeded():
    first = NeuralNet(_topology(), seed=3)
    second = NeuralNet(_topology(), seed=3)
    other = NeuralNet(_topology(), seed=4)
    assert [W.shape for W in first.weights] == [(4, 4), (5, 2)]
    assert all(np.array_equal(a, b) for a, b in zip(first.weights, second.weights))
    assert not np.array_equal(first.weights[0], other.weights[0])
    assert first.parameter_count() == 26


def test_all_weights_is_row_major_with_bias_last():
    topology = _topology(layers=(2, 1))
    net = build_network(topology, [[1.0, 2.0, 3.0]])
    assert net.weights[0].tolist() == [[1.0], [2.0], [3.0]]
    assert net.all_weights() == [[1.0, 2.0, 3.0]]
    # 1*x0 + 2*x1 + bias 3 through a sigmoid output
    out = net.infer(np.array([0.5, -1.0]))
    assert out.shape == (1,)
    assert np.isclose(out[0], 1.0 / (1.0 + np.exp(-(0.5 - 2.0 + 3.0))))


def test_build_network_rejects_wrong_layer_count():
    with pytest.raises(WeightShapeError, match="2 weighted layers") as excinfo:
        build_network(_topology(), [[0.0] * 16])
    assert excinfo.value.expected == 2
    assert excinfo.value.actual == 1


def test_build_network_rejects_wrong_layer_length():
    with pytest.raises(WeightShapeError) as excinfo:
        build_network(_topology(), [[0.0] * 16, [0.0] * 8])
    assert excinfo.value.layer == 1
    assert excinfo.value.expected == 10
    assert excinfo.value.actual == 8


def test_build_network_copies_weights():
    flat = np.zeros(3)
    net = build_network(_topology(layers=(2, 1)), [flat])
    flat[0] = 5.0
    assert net.weights[0][0, 0] == 0.0


def test_softmax_output_rows_sum_to_one():
    net = NeuralNet(_topology(output="softmax"), seed=1)
    probs = net.infer(np.random.default_rng(0).standard_normal((5, 3)))
    assert probs.shape == (5, 2)
    assert np.allclose(probs.sum(axis=1), 1.0)


def test_forward_rejects_wrong_input_width():
    net = NeuralNet(_topology(), seed=0)
    with pytest.raises(ValueError, match="3 input features"):
        net.infer(np.zeros(4))


def test_train_batch_matches_numeric_gradient():
    topology = _topology(learning_rate=1.0, momentum=0.0)
    net = NeuralNet(topology, seed=7)
    rng = np.random.default_rng(1)
    batch = Batch(inputs=rng.standard_normal((4, 3)), targets=rng.uniform(size=(4, 2)))
    before = [W.copy() for W in net.weights]

    def loss(weights):
        probe = build_network(topology, [W.ravel() for W in weights])
        out = probe.infer(batch.inputs)
        return 0.5 * np.sum((out - batch.targets) ** 2) / batch.inputs.shape[0]

    net.train_batch(batch)
    eps = 1e-6
    for layer, (row, col) in [(0, (1, 2)), (0, (3, 0)), (1, (4, 1)), (1, (0, 0))]:
        plus = [W.copy() for W in before]
        minus = [W.copy() for W in before]
        plus[layer][row, col] += eps
        minus[layer][row, col] -= eps
        numeric = (loss(plus) - loss(minus)) / (2 * eps)
        analytic = before[layer][row, col] - net.weights[layer][row, col]
        assert np.isclose(analytic, numeric, rtol=1e-4, atol=1e-8)


def test_training_reduces_error():
    x = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
    y = np.array([[0.0], [0.0], [0.0], [1.0]])
    topology = _topology(layers=(2, 3, 1), hidden="sigmoid", momentum=0.5, batch_size=2)
    net = NeuralNet(topology, seed=0)
    first = net.train(x, y, epochs=1)
    later = net.train(x, y, epochs=300)
    assert later < first


def test_activation_setters_accept_only_activations():
    net = NeuralNet(_topology(), seed=0)
    custom = CustomActivation(np.sin, np.cos)
    net.hidden_activation = custom
    assert net.hidden_activation is custom
    assert net.topology.hidden_activation is custom
    with pytest.raises(TypeError):
        net.output_activation = np.tanh
