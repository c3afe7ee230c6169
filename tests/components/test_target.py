import unittest

from craterfit import Target


class TestTarget(unittest.TestCase):
    def test_target_from_catalogue(self):
        target = Target.maker()
        self.assertEqual(target.name, "Earth")
        self.assertEqual(target.radius, 6371.01e3)
        self.assertEqual(target.diameter, 2 * 6371.01e3)
        self.assertEqual(target.color, "#2a7fff")
        self.assertIsInstance(target.radius, float)

        for name in ("Moon", "Mars", "Pluto"):
            target = Target.maker(name)
            self.assertEqual(target.name, name)
            self.assertEqual(target.radius, Target._catalogue[name]["radius"])

    def test_target_override_catalogue(self):
        target = Target.maker("Mars", radius=3000e3, color="red")
        self.assertEqual(target.radius, 3000e3)
        self.assertEqual(target.color, "red")

    def test_custom_target(self):
        target = Target(name="Vulcan", diameter=4000e3)
        self.assertEqual(target.radius, 2000e3)
        self.assertEqual(target.color, "#2a7fff")

    def test_invalid_target(self):
        with self.assertRaises(ValueError):
            Target(name="Arrakis")
        with self.assertRaises(ValueError):
            Target(name="Vulcan", radius=1.0, diameter=2.0)
        with self.assertRaises(ValueError):
            Target(name="Vulcan", radius=-1.0)
        with self.assertRaises(TypeError):
            Target.maker(42)

    def test_maker_returns_instance(self):
        target = Target(name="Moon")
        self.assertIs(Target.maker(target), target)

    def test_maker_rejects_overrides_on_instance(self):
        target = Target(name="Earth")
        with self.assertRaises(ValueError):
            Target.maker(target, radius=1e6)
        with self.assertRaises(ValueError):
            Target.maker(target, color="red")
        self.assertEqual(target.radius, 6371.01e3)
        self.assertEqual(target.color, "#2a7fff")

    def test_scene_scale(self):
        target = Target.maker("Earth")
        self.assertAlmostEqual(target.scene_scale(2.0) * target.radius, 2.0)
        with self.assertRaises(ValueError):
            target.scene_scale(0.0)

    def test_catalogue_table(self):
        text = Target.maker().catalogue
        self.assertIn("Earth", text)
        self.assertIn("Mars", text)


if __name__ == "__main__":
    unittest.main()
