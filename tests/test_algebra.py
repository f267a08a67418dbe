import unittest

from lapis.algebra import PrimitiveType, ObjectType, UnionType, merge, each_member
from lapis.syntax import Variable

INT = PrimitiveType("Int")
STRING = PrimitiveType("String")
FLOAT = PrimitiveType("Float")

class MergeTests(unittest.TestCase):

	def test_idempotent(self):
		self.assertIs(INT, merge(INT, INT))
		u = merge(INT, STRING)
		self.assertEqual(u, merge(u, u))

	def test_commutative(self):
		self.assertEqual(merge(INT, STRING), merge(STRING, INT))

	def test_associative(self):
		self.assertEqual(
			merge(merge(INT, STRING), FLOAT),
			merge(INT, merge(STRING, FLOAT)),
		)

	def test_unions_flatten(self):
		u = merge(merge(INT, STRING), merge(FLOAT, INT))
		self.assertIsInstance(u, UnionType)
		self.assertEqual({INT, STRING, FLOAT}, set(each_member(u)))

	def test_member_already_in_union(self):
		u = merge(INT, STRING)
		self.assertEqual(u, merge(u, STRING))

	def test_single_type_has_itself_as_only_member(self):
		self.assertEqual([INT], list(each_member(INT)))

class ObjectTypeTests(unittest.TestCase):

	def test_clone_is_equal_but_distinct(self):
		foo = ObjectType("Foo")
		foo.instance_vars["@x"] = Variable("@x", INT)
		twin = foo.clone()
		self.assertIsNot(foo, twin)
		self.assertEqual(foo, twin)
		self.assertIs(foo.defs, twin.defs)

	def test_clone_fields_evolve_separately(self):
		foo = ObjectType("Foo")
		foo.instance_vars["@x"] = Variable("@x", INT)
		twin = foo.clone()
		twin.instance_vars["@x"].add_type(STRING)
		self.assertEqual(INT, foo.instance_vars["@x"].type)
		self.assertNotEqual(foo, twin)

	def test_names_matter(self):
		self.assertNotEqual(ObjectType("Foo"), ObjectType("Bar"))
		self.assertNotEqual(ObjectType("Int"), INT)

	def test_self_referential_types_compare(self):
		a, b = ObjectType("Node"), ObjectType("Node")
		a.instance_vars["@next"] = Variable("@next", a)
		b.instance_vars["@next"] = Variable("@next", b)
		self.assertEqual(a, b)

	def test_union_of_clones_collapses(self):
		foo = ObjectType("Foo")
		self.assertEqual(foo, merge(foo, foo.clone()))


if __name__ == '__main__':
	unittest.main()
