"""
Save and resume a session
=========================

.. rubric:: By David Minton

This example edits the sample table, switches to the linear fit model and draws the crater on Mars. The session is saved to
the configuration file in the project directory and restored from it.

"""

import craterfit as cf

session = cf.Session(simdir="mars_drop", target="Mars", fit_model="linear")
session.add_sample(3.0, 4.0)
session.edit_sample(0, depth=0.6)
session.delete_sample(1)
print(session.samples)

geometry = session.scene_geometry()
print(f"Scene depth: {geometry.depth:.3f}, scene radius: {geometry.radius:.3f}")
session.to_config()

restored = cf.Session(simdir="mars_drop", resume_old=True)
print(restored)
