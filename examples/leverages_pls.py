"""
This file contains an example of computing the leverages of the predictor variables
in a PLS model with three latent variables.

The first two predictor variables drive the responses, so they are expected to carry
the largest leverages. The variables are split in two classes for the bar plot.

Note: The code assumes the availability of the `plscv` package and its dependencies.
Plotting requires matplotlib: pip install plscv[plot]
"""

import numpy as np

from plscv import leverages_pls

if __name__ == "__main__":
    rng = np.random.default_rng(0)
    X = rng.standard_normal((100, 10))
    Y = rng.standard_normal((100, 2)) + X[:, :2]

    labels = [f"x{i + 1}" for i in range(X.shape[1])]
    classes = np.array([1] * 5 + [2] * 5)

    L = leverages_pls(
        X, Y, lvs=[1, 2, 3], plot=False, labels=labels, classes=classes
    )
    for label, leverage in sorted(zip(labels, L), key=lambda pair: -pair[1]):
        print(f"{label}: {leverage:.3f}")
