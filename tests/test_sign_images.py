import unittest
import tempfile
import sys
import os
from PIL import Image

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from signtranslator.ui.sign_images import SignImageLibrary


class TestSignImageLibrary(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.image_dir = self._tmp.name
        self.library = SignImageLibrary(image_dir=self.image_dir, size=(64, 64))

    def tearDown(self):
        self._tmp.cleanup()

    def test_image_name_is_upper_case(self):
        self.assertEqual(SignImageLibrary.image_name("a"), "A")
        self.assertEqual(self.library.image_path("b"), os.path.join(self.image_dir, "B.png"))

    def test_existing_image_is_scaled_to_fit(self):
        Image.new("RGB", (300, 150), (255, 0, 0)).save(os.path.join(self.image_dir, "B.png"))
        self.assertTrue(self.library.has_image("b"))

        image = self.library.load("b")
        self.assertEqual(image.size, (64, 32))
        self.assertEqual(image.mode, "RGBA")

    def test_missing_image_gets_placeholder(self):
        self.assertFalse(self.library.has_image("Z"))
        image = self.library.load("z")
        self.assertEqual(image.size, (64, 64))
        self.assertEqual(image.mode, "RGBA")

    def test_unreadable_image_gets_placeholder(self):
        with open(os.path.join(self.image_dir, "C.png"), "wb") as f:
            f.write(b"not a png")

        with self.assertLogs("signtranslator.ui.sign_images", level="WARNING"):
            image = self.library.load("C")
        self.assertEqual(image.size, (64, 64))


if __name__ == '__main__':
    unittest.main()
