import unittest

from lapis.algebra import merge
from lapis.diagnostics import UndefinedMethod
from lapis.type_inference import infer_type, Dispatch
from specimens import lit, char, ref, call, new, assign, block, method, klass

def _two_classes(a_body, b_body, name="bar", params=()):
	return [
		klass("A", method(name, list(params), a_body)),
		klass("B", method(name, list(params), b_body)),
		assign("x", new("A")),
		assign("x", new("B")),
	]

class DispatchTests(unittest.TestCase):

	def test_union_receiver_gives_union_result(self):
		site = call("bar", obj=ref("x"))
		mod = infer_type(block(*_two_classes(lit(1), lit("s")), site))
		self.assertEqual(merge(mod.int, mod.string), site.type)
		self.assertIsInstance(site.target_def, Dispatch)
		self.assertEqual({"A", "B"}, {obj.name for obj, in site.target_def.calls})

	def test_coinciding_results_give_a_single_type(self):
		site = call("bar", obj=ref("x"))
		mod = infer_type(block(*_two_classes(lit(1), lit(2)), site))
		self.assertEqual(mod.int, site.type)

	def test_union_argument_to_top_level_method(self):
		site = call("identity", ref("y"))
		tree = block(
			method("identity", ["v"], ref("v")),
			assign("y", lit(1)),
			assign("y", lit("s")),
			site,
		)
		mod = infer_type(tree)
		self.assertEqual(merge(mod.int, mod.string), site.type)
		self.assertEqual({(mod.int,), (mod.string,)}, set(mod.defs["identity"].instances))

	def test_every_combination_gets_a_member_call(self):
		site = call("combine", ref("a"), ref("b"))
		tree = block(
			method("combine", ["p", "q"], ref("q")),
			assign("a", lit(1)), assign("a", lit("s")),
			assign("b", lit(1)), assign("b", lit(1.5)), assign("b", char("c")),
			site,
		)
		mod = infer_type(tree)
		dispatch = site.target_def
		self.assertEqual(2 * 3, len(dispatch.calls))
		self.assertEqual(6, len(mod.defs["combine"].instances))
		self.assertEqual(merge(merge(mod.int, mod.float), mod.char), dispatch.type)
		self.assertEqual(dispatch.type, site.type)

	def test_receiver_and_arguments_multiply(self):
		site = call("echo", ref("y"), obj=ref("x"))
		tree = block(
			*_two_classes(block(ref("v")), block(lit(1.5)), name="echo", params=["v"]),
			assign("y", lit(1)),
			assign("y", lit("s")),
			site,
		)
		mod = infer_type(tree)
		self.assertEqual(2 * 2, len(site.target_def.calls))
		self.assertEqual(merge(merge(mod.int, mod.string), mod.float), site.type)

	def test_aggregate_is_merge_of_member_results(self):
		site = call("bar", obj=ref("x"))
		infer_type(block(*_two_classes(lit(1), lit(2.5)), site))
		dispatch = site.target_def
		results = [c.type for c in dispatch.calls.values()]
		expect = results[0]
		for typ in results[1:]: expect = merge(expect, typ)
		self.assertEqual(expect, dispatch.type)

	def test_each_call_site_builds_its_own_dispatch(self):
		first, second = call("bar", obj=ref("x"), spot=3), call("bar", obj=ref("x"), spot=7)
		mod = infer_type(block(*_two_classes(lit(1), lit("s")), first, second))
		self.assertIsNot(first.target_def, second.target_def)
		self.assertEqual(2, len(mod.dispatches))
		for site in first, second:
			self.assertIs(site.nom, site.target_def.nom)
			for member in site.target_def.calls.values():
				self.assertIs(site.nom, member.nom)

	def test_recalculating_a_site_keeps_its_dispatch(self):
		site = call("bar", obj=ref("x"))
		mod = infer_type(block(*_two_classes(lit(1), lit("s")), site))
		dispatch = site.target_def
		site.recalculate()
		self.assertIs(dispatch, site.target_def)
		self.assertEqual(1, len(mod.dispatches))

	def test_member_failure_points_at_its_own_call_site(self):
		site = call("baz", obj=ref("x"), spot=9)
		tree = block(
			klass("A", method("baz", [], lit(1))),
			klass("B"),
			assign("x", new("A")),
			assign("x", new("B")),
			site,
		)
		with self.assertRaises(UndefinedMethod) as context:
			infer_type(tree)
		self.assertEqual("undefined method 'baz' for B", context.exception.message)
		self.assertIs(site.nom, context.exception.node.nom)

	def test_native_operator_over_union(self):
		site = call("+", lit(1), obj=ref("n"))
		tree = block(assign("n", lit(1)), assign("n", lit(1.5)), site)
		mod = infer_type(tree)
		self.assertEqual(merge(mod.int, mod.float), site.type)

	def test_call_that_widens_later_switches_to_dispatch(self):
		site = call("bar", obj=ref("x"))
		tree = block(
			klass("A", method("bar", [], lit(1))),
			klass("B", method("bar", [], lit("s"))),
			assign("x", new("A")),
			site,
			assign("x", new("B")),
		)
		mod = infer_type(tree)
		self.assertEqual(merge(mod.int, mod.string), site.type)
		self.assertIsInstance(site.target_def, Dispatch)


if __name__ == '__main__':
	unittest.main()
