"""
This file contains an example of choosing the number of latent variables of a PLS
model with row-wise k-fold cross-validation.

Random data with a structural relationship between the first two predictor variables
and the two response variables is generated. The cumulative PRESS is computed for
0 to 10 latent variables and the number of latent variables with the lowest PRESS is
reported.

To run the cross-validation, execute the file. Set `plot` to True to render the
PRESS curve, which requires matplotlib.

Note: The code assumes the availability of the `plscv` package and its dependencies.
"""

import numpy as np

from plscv import PrepMode, crossval_pls

if __name__ == "__main__":
    N = 100  # Number of samples.
    M = 10  # Number of predictor variables.
    seed = 42

    rng = np.random.default_rng(seed)
    X = rng.standard_normal((N, M))
    Y = rng.standard_normal((N, 2)) + X[:, :2]

    # Centering and scaling are computed over the training blocks only to avoid
    # data leakage from the held-out blocks.
    lvs = np.arange(0, 11)
    cumpress, press = crossval_pls(
        X,
        Y,
        lvs=lvs,
        blocks_r=10,
        prepx=PrepMode.AUTOSCALE,
        prepy=PrepMode.AUTOSCALE,
        plot=False,
        random_state=seed,
        n_jobs=-1,
        verbose=10,
    )

    # cumpress has shape (max(lvs) + 1,). Entry a is the PRESS with a LVs.
    best_num_lvs = int(np.argmin(cumpress[lvs]))
    print(f"Cumulative PRESS: {np.round(cumpress, 2)}")
    print(f"PRESS per response variable:\n{np.round(press, 2)}")
    print(f"Lowest PRESS with {lvs[best_num_lvs]} latent variable(s).")
