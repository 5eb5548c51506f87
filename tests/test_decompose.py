import unittest

from svg2colr.config import BuildConfig
from svg2colr.decompose import ShapeDecomposer
from svg2colr.errors import Svg2ColrError
from svg2colr.svgScene import NodeKind, parseDocument
from svg2colr.transformTools import parseTransform


def svg(body):
    return (
        '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink"'
        ' viewBox="0 0 100 100">%s</svg>' % body
    ).encode("utf-8")


def decompose(body, config=None):
    doc = parseDocument(svg(body))
    return ShapeDecomposer("test.svg", config).decompose(doc.children)


class SplitTests(unittest.TestCase):
    def test_fill_and_stroke(self):
        fill, stroke = decompose(
            '<path d="M0 0 L10 0 L10 10 Z" fill="#f00" stroke="#00f" stroke-width="2"/>'
        )
        self.assertEqual(fill.color, "#ff0000ff")
        self.assertEqual(fill.attrib["fill"], "#000")
        self.assertEqual(fill.attrib["stroke"], "none")
        self.assertEqual(fill.attrib["stroke-width"], "0")
        self.assertEqual(stroke.color, "#0000ffff")
        self.assertEqual(stroke.attrib["fill"], "none")
        self.assertEqual(stroke.attrib["stroke"], "#000")
        self.assertEqual(stroke.attrib["stroke-width"], "2")

    def test_default_fill_is_black(self):
        (sublayer,) = decompose('<rect x="0" y="0" width="5" height="5"/>')
        self.assertEqual(sublayer.color, "#000000ff")
        self.assertEqual(sublayer.kind, NodeKind.RECT)
        self.assertFalse(sublayer.transformed)

    def test_fill_none(self):
        (sublayer,) = decompose('<circle cx="5" cy="5" r="5" fill="none" stroke="#0f0"/>')
        self.assertEqual(sublayer.color, "#00ff00ff")
        self.assertEqual(sublayer.attrib["stroke-width"], "1")

    def test_path_subpaths_are_closed(self):
        (sublayer,) = decompose('<path d="M0 0 L10 0 M20 0 L30 0"/>')
        self.assertEqual(sublayer.attrib["d"], "M0 0 L10 0 zM20 0 L30 0")

    def test_source_nodes_are_not_modified(self):
        doc = parseDocument(svg('<path d="M0 0 L1 1 M2 2 L3 3" fill="#f00"/>'))
        ShapeDecomposer().decompose(doc.children)
        self.assertEqual(doc.children[0].attrib, {"d": "M0 0 L1 1 M2 2 L3 3"})


class InheritanceTests(unittest.TestCase):
    def test_group_paint_and_opacity(self):
        (sublayer,) = decompose('<g fill="#0f0" opacity="0.5"><circle cx="5" cy="5" r="5"/></g>')
        self.assertEqual(sublayer.color, "#00ff0080")

    def test_nested_opacity_multiplies(self):
        (sublayer,) = decompose(
            '<g opacity="0.5"><g opacity="50%"><rect width="1" height="1" fill="#fff"/></g></g>'
        )
        self.assertEqual(sublayer.color, "#ffffff40")

    def test_child_overrides_group(self):
        (sublayer,) = decompose('<g fill="#0f0"><rect width="1" height="1" fill="#00f"/></g>')
        self.assertEqual(sublayer.color, "#0000ffff")

    def test_transform_is_inherited(self):
        (sublayer,) = decompose('<g transform="scale(2)"><rect width="1" height="1"/></g>')
        self.assertEqual(sublayer.attrib["transform"], "scale(2)")
        self.assertTrue(sublayer.transformed)

    def test_pivot_rotation_is_expanded(self):
        (sublayer,) = decompose('<rect width="1" height="1" transform="rotate(90 5 5)"/>')
        self.assertEqual(
            sublayer.attrib["transform"], "translate(5 5) rotate(90) translate(-5 -5)"
        )

    def test_metadata_is_skipped(self):
        self.assertEqual(decompose("<title>x</title><metadata/>"), [])


class ThinStrokeTests(unittest.TestCase):
    def test_hairline_path_stroke_is_dropped(self):
        sublayers = decompose('<path d="M0 0 L10 10" stroke="#f00" stroke-width="0.1"/>')
        self.assertEqual([s.attrib["stroke"] for s in sublayers], ["none"])

    def test_thin_but_short_path_stroke_is_kept(self):
        sublayers = decompose('<path d="M0 0 L10 10" stroke="#f00" stroke-width="0.2"/>')
        self.assertEqual(len(sublayers), 2)

    def test_long_thin_path_stroke_is_dropped(self):
        d = "M0 0" + " L1 1" * 120
        sublayers = decompose('<path d="%s" fill="none" stroke="#f00" stroke-width="0.2"/>' % d)
        self.assertEqual(sublayers, [])

    def test_shapes_keep_hairlines(self):
        sublayers = decompose('<circle cx="5" cy="5" r="5" fill="none" stroke="#f00" stroke-width="0.05"/>')
        self.assertEqual(len(sublayers), 1)

    def test_thresholds_come_from_config(self):
        config = BuildConfig(hairlineStrokeWidth=0.0)
        sublayers = decompose(
            '<path d="M0 0 L10 10" fill="none" stroke="#f00" stroke-width="0.1"/>', config
        )
        self.assertEqual(len(sublayers), 1)


class GradientTests(unittest.TestCase):
    GRADIENT = (
        '<defs><linearGradient id="g"><stop stop-color="#f00"/><stop stop-color="#00f"/>'
        "</linearGradient></defs>"
    )

    def test_gradient_fill(self):
        (sublayer,) = decompose(self.GRADIENT + '<rect width="1" height="1" fill="url(#g)"/>')
        self.assertEqual(sublayer.color, "#800080ff")

    def test_gradient_outside_defs(self):
        body = (
            '<radialGradient id="r"><stop stop-color="#fff"/></radialGradient>'
            '<rect width="1" height="1" fill="url(#r)"/>'
        )
        (sublayer,) = decompose(body)
        self.assertEqual(sublayer.color, "#ffffffff")

    def test_gradient_reusing_stops(self):
        body = (
            self.GRADIENT
            + '<linearGradient id="h" xlink:href="#g" x1="0"/>'
            + '<rect width="1" height="1" fill="url(#h)"/>'
        )
        (sublayer,) = decompose(body)
        self.assertEqual(sublayer.color, "#800080ff")

    def test_unresolved_reference_warns_and_inherits(self):
        with self.assertLogs("svg2colr.decompose", "WARNING") as logs:
            (sublayer,) = decompose(
                '<g fill="#0f0"><rect width="1" height="1" fill="url(#missing)"/></g>'
            )
        self.assertEqual(sublayer.color, "#00ff00ff")
        self.assertIn("test.svg: no mapping for url(#missing)", logs.output[0])


class ReferenceTests(unittest.TestCase):
    def test_use_of_definition(self):
        body = (
            '<defs><path id="p" d="M0 0 L5 5 L0 5 Z"/></defs>'
            '<use xlink:href="#p" x="5" fill="#f00"/>'
        )
        (sublayer,) = decompose(body)
        self.assertEqual(sublayer.kind, NodeKind.PATH)
        self.assertEqual(sublayer.color, "#ff0000ff")
        self.assertEqual(sublayer.attrib["transform"], "translate(5 0)")

    def test_use_of_rendered_shape(self):
        body = '<rect id="r" width="1" height="1"/><use href="#r" transform="scale(2)"/>'
        first, second = decompose(body)
        self.assertFalse(first.transformed)
        self.assertEqual(second.attrib["transform"], "scale(2)")

    def test_nested_definitions(self):
        body = (
            '<defs><g id="outer"><circle id="dot" cx="1" cy="1" r="1"/></g></defs>'
            '<use xlink:href="#dot"/>'
        )
        (sublayer,) = decompose(body)
        self.assertEqual(sublayer.kind, NodeKind.CIRCLE)

    def test_use_offset_precedes_target_transform(self):
        body = (
            '<defs><rect id="r" width="1" height="1" transform="scale(2)"/></defs>'
            '<use xlink:href="#r" x="10"/><use xlink:href="#r"/>'
        )
        moved, plain = decompose(body)
        self.assertEqual(moved.attrib["transform"], "translate(10 0) scale(2)")
        self.assertEqual(parseTransform(moved.attrib["transform"]).transformPoint((0, 0)), (10, 0))
        self.assertEqual(plain.attrib["transform"], "scale(2)")

    def test_reference_cycle(self):
        body = '<g id="a"><rect width="1" height="1"/><use xlink:href="#a"/></g>'
        with self.assertRaises(Svg2ColrError) as cm:
            decompose(body)
        self.assertIn("test.svg", str(cm.exception))

    def test_repeated_use_is_not_a_cycle(self):
        body = (
            '<defs><rect id="r" width="1" height="1"/></defs>'
            '<use xlink:href="#r"/><use xlink:href="#r" y="3"/>'
        )
        self.assertEqual(len(decompose(body)), 2)

    def test_unknown_reference_is_dropped(self):
        self.assertEqual(decompose('<use xlink:href="#nothing"/>'), [])


if __name__ == "__main__":
    unittest.main()
