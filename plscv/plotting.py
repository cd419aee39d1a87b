"""
Optional rendering of the vectors produced by `crossval_pls` and `leverages_pls`.

matplotlib is only needed when plotting. Install it with: pip install plscv[plot]
"""

from typing import Optional, Sequence

import numpy as np
import numpy.typing as npt


def _pyplot():
    try:
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise ImportError(
            "Plotting requires matplotlib. Install with: pip install plscv[plot]"
        ) from e
    return plt


def plot_vec(
    values: npt.ArrayLike,
    labels: Optional[npt.ArrayLike] = None,
    classes: Optional[npt.ArrayLike] = None,
    xylabels: Optional[Sequence[str]] = None,
    kind: str = "bar",
    ax=None,
):
    """
    Plots a vector against its labels.

    Parameters
    ----------
    values : Array of shape (K,)
        Values to plot.

    labels : Array-like of shape (K,) or None, optional, default=None
        Tick labels. Defaults to `1, ..., K`.

    classes : Array-like of shape (K,) or None, optional, default=None
        Group of each entry. Each group gets its own colour and legend entry. Only
        used for bar plots.

    xylabels : Sequence of two str or None, optional, default=None
        Labels of the x and y axes.

    kind : str, optional, default="bar"
        "bar" for a bar plot, "line" for a line plot with markers.

    ax : matplotlib Axes or None, optional, default=None
        Axes to draw on. If None, then a new figure is created.

    Returns
    -------
    fig : matplotlib Figure
        The figure containing the plot.

    Raises
    ------
    ValueError
        If `kind` is not "bar" or "line".
    """
    if kind not in ("bar", "line"):
        raise ValueError(f"Invalid kind: {kind}. Must be 'bar' or 'line'.")
    plt = _pyplot()
    values = np.asarray(values, dtype=float).reshape(-1)
    if labels is None:
        labels = np.arange(1, values.size + 1)
    labels = np.asarray(labels).reshape(-1)
    positions = np.arange(values.size)

    if ax is None:
        fig, ax = plt.subplots()
    else:
        fig = ax.figure

    if kind == "line":
        ax.plot(positions, values, marker="o")
    elif classes is None:
        ax.bar(positions, values)
    else:
        classes = np.asarray(classes).reshape(-1)
        for group in np.unique(classes):
            mask = classes == group
            ax.bar(positions[mask], values[mask], label=str(group))
        if np.unique(classes).size > 1:
            ax.legend()

    ax.set_xticks(positions)
    ax.set_xticklabels([str(label) for label in labels])
    if xylabels is not None:
        ax.set_xlabel(xylabels[0])
        ax.set_ylabel(xylabels[1])
    return fig
