"""
Tests for the matplotlib rendering hooks. Skipped when matplotlib is not installed.
"""

import numpy as np
import pytest

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from plscv.cross_validation import crossval_pls  # noqa: E402
from plscv.leverages import leverages_pls  # noqa: E402
from plscv.plotting import plot_vec  # noqa: E402


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


def test_bar_plot_one_bar_per_value():
    fig = plot_vec([1.0, 2.0, 3.0], labels=["a", "b", "c"], xylabels=("x", "y"))
    ax = fig.axes[0]

    assert len(ax.patches) == 3
    assert ax.get_xlabel() == "x"
    assert [tick.get_text() for tick in ax.get_xticklabels()] == ["a", "b", "c"]


def test_bar_plot_with_classes_has_legend():
    fig = plot_vec([1.0, 2.0, 3.0, 4.0], classes=[1, 1, 2, 2])
    ax = fig.axes[0]

    assert len(ax.patches) == 4
    assert ax.get_legend() is not None


def test_line_plot():
    fig = plot_vec([3.0, 2.0, 1.0], labels=[0, 1, 2], kind="line")

    assert len(fig.axes[0].lines) == 1


def test_invalid_kind():
    with pytest.raises(ValueError):
        plot_vec([1.0], kind="pie")


def test_default_renderers():
    rng = np.random.default_rng(0)
    X = rng.standard_normal((30, 4))
    Y = X[:, :1] + 0.1 * rng.standard_normal((30, 1))

    crossval_pls(X, Y, lvs=range(3), blocks_r=5, plot=True, random_state=0)
    leverages_pls(X, Y, lvs=[1, 2], plot=True)

    assert len(plt.get_fignums()) == 2
