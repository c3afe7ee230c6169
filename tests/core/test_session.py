import tempfile
import unittest
import warnings
from pathlib import Path

import numpy as np
import yaml

from craterfit import DataError, Frame, ImpactState, SceneGeometry, Session, Target
from craterfit.components.fitmodel.linear import Linear


class TestSession(unittest.TestCase):
    def setUp(self):
        self.tempdir = tempfile.TemporaryDirectory(ignore_cleanup_errors=True)
        self.simdir = Path(self.tempdir.name)

    def tearDown(self):
        self.tempdir.cleanup()

    def test_defaults(self):
        session = Session(simdir=self.simdir)
        self.assertEqual(session.samples.to_list(), [[1.0, 0.5], [2.0, 2.0]])
        self.assertEqual(session.fit_model.name, "power")
        self.assertEqual(session.target.name, "Earth")
        self.assertEqual(session.target_height, 100e3)
        self.assertEqual(session.host_radius, 2.0)
        self.assertIs(session.state, ImpactState.IDLE)

        result = session.extrapolate()
        self.assertAlmostEqual(result.depth / 5e9, 1.0, places=9)
        geometry = session.scene_geometry()
        self.assertAlmostEqual(geometry.depth, 1.4, places=12)
        self.assertAlmostEqual(geometry.radius, 1.4, places=12)

    def test_sample_commands(self):
        session = Session(simdir=self.simdir)
        session.add_sample(4.0, 8.0)
        self.assertEqual(len(session.samples), 3)
        session.edit_sample(2, depth=7.5)
        self.assertEqual(session.samples[2].depth, 7.5)
        session.delete_sample(0)
        self.assertEqual(session.samples.to_list(), [[2.0, 2.0], [4.0, 7.5]])
        with self.assertRaises(DataError):
            session.add_sample(0.0, 1.0)
        self.assertEqual(len(session.samples), 2)
        session.reset_samples()
        self.assertEqual(session.samples.to_list(), [[1.0, 0.5], [2.0, 2.0]])

    def test_choose_fit_model(self):
        session = Session(simdir=self.simdir, samples=[(1.0, 1.0), (3.0, 5.0)], target_height=10.0)
        session.fit_model = "linear"
        self.assertIsInstance(session.fit_model, Linear)
        self.assertAlmostEqual(session.extrapolate().depth, 19.0, places=9)
        self.assertAlmostEqual(session.extrapolate("power").depth, 5.0 * (10.0 / 3.0) ** (np.log(5.0) / np.log(3.0)), places=6)
        with self.assertRaises(KeyError):
            session.fit_model = "spline"

    def test_insufficient_data_is_silent(self):
        session = Session(simdir=self.simdir, samples=[])
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = session.extrapolate()
        self.assertEqual(result.depth, 0.0)
        self.assertEqual(result.radius, 0.2)
        self.assertEqual(session.scene_geometry().depth, 0.01)

    def test_degenerate_fit_degrades_safely(self):
        session = Session(simdir=self.simdir, samples=[(2.0, 1.0), (2.0, 3.0)])
        with self.assertWarns(RuntimeWarning):
            result = session.extrapolate()
        self.assertEqual(result.depth, 0.0)
        self.assertTrue(result.is_fallback)
        with self.assertWarns(RuntimeWarning):
            frame = session.advance(0.1)
        self.assertEqual(frame.geometry.depth, 0.01)

    def test_compare(self):
        session = Session(simdir=self.simdir)
        curves = session.compare(num=5)
        np.testing.assert_allclose(curves["height"], np.linspace(1.0, 2.0, 5))
        np.testing.assert_allclose(curves["power"], 0.5 * curves["height"] ** 2)
        np.testing.assert_allclose(curves["linear"], 1.5 * curves["height"] - 1.0)

        curves = session.compare([10.0])
        self.assertAlmostEqual(curves["power"][0], 50.0)

        session = Session(simdir=self.simdir, samples=[(2.0, 1.0), (2.0, 3.0)])
        with self.assertWarns(RuntimeWarning):
            curves = session.compare()
        self.assertTrue(np.all(np.isnan(curves["power"])))

        session = Session(simdir=self.simdir, samples=[])
        self.assertEqual(session.compare()["height"].size, 0)

    def test_compare_geometry(self):
        session = Session(simdir=self.simdir, samples=[(1.0, 1.0), (2.0, 2.0)], target_height=50.0)
        geometries = session.compare_geometry()
        self.assertEqual(set(geometries), {"power", "linear"})
        for geometry in geometries.values():
            self.assertIsInstance(geometry, SceneGeometry)
            self.assertAlmostEqual(geometry.depth, 0.5)

    def test_animation_frames(self):
        session = Session(simdir=self.simdir)
        frame = session.frame()
        self.assertIsInstance(frame, Frame)
        self.assertIs(frame.state, ImpactState.IDLE)
        self.assertFalse(frame.crater_visible)

        self.assertIs(session.play(), ImpactState.FALLING)
        frame = session.advance(0.5)
        np.testing.assert_allclose(frame.marker_position, [0.0, 4.0, 0.0])
        self.assertTrue(frame.marker_visible)

        frame = session.advance(0.5)
        self.assertIs(frame.state, ImpactState.IMPACTED)
        self.assertTrue(frame.crater_visible)
        self.assertFalse(frame.marker_visible)

        self.assertIs(session.reset(), ImpactState.IDLE)
        np.testing.assert_allclose(session.frame().marker_position, [0.0, 8.0, 0.0])

    def test_cavity(self):
        session = Session(simdir=self.simdir, samples=[(1.0, 1.0), (2.0, 2.0)], target_height=50.0)
        cavity = session.cavity()
        self.assertAlmostEqual(cavity.apex[1], 1.5)
        self.assertEqual(cavity.host_radius, 2.0)

    def test_invalid_parameters(self):
        with self.assertRaises(ValueError):
            Session(simdir=self.simdir, target_height=-1.0)
        with self.assertRaises(ValueError):
            Session(simdir=self.simdir, host_radius=0.0)
        with self.assertRaises(ValueError):
            Session(simdir=self.simdir, crater_scale=1e-4)
        with self.assertRaises(DataError):
            Session(simdir=self.simdir, samples=[(1.0, -1.0)])

    def test_config_round_trip(self):
        session = Session(simdir=self.simdir, fit_model="linear", target="Mars", target_height=5e3)
        session.add_sample(3.0, 4.5)
        config = session.to_config()
        self.assertTrue(session.config_file.exists())
        self.assertEqual(config["fit_model"], "linear")
        self.assertEqual(config["target"], "Mars")
        self.assertEqual(config["target_height"], 5e3)
        self.assertNotIn("simdir", config)

        with open(session.config_file) as f:
            saved = yaml.safe_load(f)
        self.assertEqual(saved["samples"], [[1.0, 0.5], [2.0, 2.0], [3.0, 4.5]])

        restored = Session(simdir=self.simdir, resume_old=True)
        self.assertEqual(restored.fit_model.name, "linear")
        self.assertEqual(restored.target.name, "Mars")
        self.assertEqual(restored.target_height, 5e3)
        self.assertEqual(restored.samples, session.samples)

        # Explicit arguments win over the file
        restored = Session(simdir=self.simdir, resume_old=True, fit_model="power")
        self.assertEqual(restored.fit_model.name, "power")

        # Without resume_old the file is ignored
        fresh = Session(simdir=self.simdir)
        self.assertEqual(fresh.fit_model.name, "power")
        self.assertEqual(len(fresh.samples), 2)

    def test_custom_target_round_trip(self):
        session = Session(simdir=self.simdir, target="Vulcan", radius=1000e3)
        self.assertEqual(session.target.radius, 1000e3)
        config = session.to_config()
        self.assertNotIn("target", config)
        self.assertEqual(config["target_config"]["name"], "Vulcan")

        restored = Session(simdir=self.simdir, resume_old=True)
        self.assertEqual(restored.target.name, "Vulcan")
        self.assertEqual(restored.target.radius, 1000e3)

        # An explicit target replaces the saved custom body, size and color included
        restored = Session(simdir=self.simdir, resume_old=True, target="Moon")
        self.assertEqual(restored.target.name, "Moon")
        self.assertEqual(restored.target.radius, 1737.53e3)
        self.assertEqual(restored.target.color, "#a8a8a8")

        restored = Session(simdir=self.simdir, resume_old=True, target="Vulcan", radius=500e3)
        self.assertEqual(restored.target.radius, 500e3)

        # Keyword arguments still apply on top of the saved body
        restored = Session(simdir=self.simdir, resume_old=True, color="red")
        self.assertEqual(restored.target.name, "Vulcan")
        self.assertEqual(restored.target.radius, 1000e3)
        self.assertEqual(restored.target.color, "red")

    def test_resumed_catalogue_target_with_overrides(self):
        Session(simdir=self.simdir, target="Mars").to_config()
        restored = Session(simdir=self.simdir, resume_old=True, radius=3000e3)
        self.assertEqual(restored.target.name, "Mars")
        self.assertEqual(restored.target.radius, 3000e3)

    def test_target_object_with_overrides(self):
        with self.assertRaises(ValueError):
            Session(simdir=self.simdir, target=Target(name="Earth"), radius=1e6)
        session = Session(simdir=self.simdir, target=Target(name="Moon"))
        self.assertEqual(session.target.name, "Moon")

    def test_host_radius_change_keeps_animation(self):
        session = Session(simdir=self.simdir)
        session.play()
        session.advance(0.25)
        session.host_radius = 3.0
        self.assertIs(session.state, ImpactState.FALLING)
        self.assertEqual(session.sequencer.height, 6.0)
        self.assertAlmostEqual(session.sequencer.impact_height, 3.2)

        session.advance(0.25)
        self.assertIs(session.state, ImpactState.FALLING)
        session.advance(0.25)
        self.assertIs(session.state, ImpactState.IMPACTED)
        self.assertAlmostEqual(session.sequencer.height, 3.2)

        session.host_radius = 2.0
        self.assertIs(session.state, ImpactState.IMPACTED)
        self.assertAlmostEqual(session.sequencer.height, 2.2)

    def test_str(self):
        text = str(Session(simdir=self.simdir))
        self.assertIn("Estimated crater depth: 50000000.000 m", text)
        self.assertIn("Earth", text)

    def test_str_falling_trend(self):
        session = Session(simdir=self.simdir, samples=[(1.0, 2.0), (2.0, 1.0)], fit_model="linear", target_height=100.0)
        self.assertAlmostEqual(session.extrapolate().depth, -97.0)
        self.assertIn("Estimated crater depth: 0.000 m", str(session))


if __name__ == "__main__":
    unittest.main()
