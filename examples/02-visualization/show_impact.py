"""
Animate the impact with PyVista
===============================

.. rubric:: By David Minton

This example opens a 3D view of the host sphere. The marker is dropped from above and the crater appears once it reaches
the surface. Press "p" to drop the marker again and "r" to reset it.

"""

import craterfit as cf

session = cf.Session(samples=[(1.0, 0.5), (2.0, 2.0), (3.0, 4.4)])
for name, geometry in session.compare_geometry().items():
    print(f"{name}: depth={geometry.depth:.3f}, radius={geometry.radius:.3f}")

session.show()
