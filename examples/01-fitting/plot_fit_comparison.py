"""
Compare the power law and linear fits
=====================================

.. rubric:: By David Minton

This example fits a handful of drop-test samples with both of the available fit models and plots them together. The second
panel extends the fits out to the edge of the atmosphere, where the two models disagree by orders of magnitude.

"""

import matplotlib.pyplot as plt

import craterfit as cf

session = cf.Session(samples=[(0.5, 0.2), (1.0, 0.5), (1.5, 1.1), (2.0, 2.0)])
print(session)

fig, (ax_samples, ax_extrapolation) = plt.subplots(1, 2, figsize=(10, 4))
session.plot_comparison(ax=ax_samples)
session.plot_comparison(ax=ax_extrapolation, show_extrapolation=True)
ax_extrapolation.set_title("Extrapolated to 100 km")

for name in cf.FitModel.available():
    print(session.extrapolate(name))

plt.tight_layout()
plt.show()
