"""
The algebra of inferred types.
===============================

A LapisType is a judgement about what an expression may evaluate to.
The inference engine only ever needs three things from this module:

* equality and hashing good enough to key the specialization cache,
* a way to iterate the members of a union, and
* merge, which is commutative, associative and idempotent.

Object types are compared structurally on their name and the current
types of their instance variables. Those are mutable during inference,
so the hash only looks at the name.
"""
from typing import Iterable, Iterator

# Pairs of object types currently being compared, assumed equal until shown otherwise.
# This is what lets a self-referential object type compare equal to its own clone.
_ASSUMED = set()

class LapisType:
	name: str
	defs: dict

	def __repr__(self) -> str: return self.name
	def lookup_def(self, name:str):
		return self.defs.get(name)
	def members(self) -> tuple["LapisType", ...]:
		return (self,)

class PrimitiveType(LapisType):
	""" Built-in types are the same type whenever the names agree. """
	def __init__(self, name:str):
		self.name = name
		self.defs = {}
	def __eq__(self, other):
		return isinstance(other, PrimitiveType) and other.name == self.name
	def __hash__(self): return hash((PrimitiveType, self.name))

class ObjectType(LapisType):
	"""
	The type of instances of a user-defined class.

	Each constructor site gets its own clone, so that instance variables
	can be typed per allocation site. Clones share the method table.
	"""
	def __init__(self, name:str, defs:dict=None):
		self.name = name
		self.defs = {} if defs is None else defs
		self.instance_vars = {}

	def clone(self) -> "ObjectType":
		twin = ObjectType(self.name, self.defs)
		twin.instance_vars = {key: var.clone() for key, var in self.instance_vars.items()}
		return twin

	def field_types(self) -> dict:
		return {key: var.type for key, var in self.instance_vars.items()}

	def __eq__(self, other):
		if self is other: return True
		if not isinstance(other, ObjectType) or other.name != self.name: return False
		pair = id(self), id(other)
		if pair in _ASSUMED: return True
		_ASSUMED.add(pair)
		try: return self.field_types() == other.field_types()
		finally: _ASSUMED.discard(pair)

	def __hash__(self): return hash((ObjectType, self.name))

class UnionType(LapisType):
	""" One of several possible concrete types. Never nested, never a singleton. """
	def __init__(self, types:Iterable[LapisType]):
		self.types = tuple(types)
		assert len(self.types) > 1
		assert not any(isinstance(t, UnionType) for t in self.types)
		self._key = frozenset(self.types)
		self.defs = {}

	@property
	def name(self) -> str:
		return "Union[%s]" % ", ".join(sorted(t.name for t in self.types))

	def members(self) -> tuple[LapisType, ...]:
		return self.types

	def __eq__(self, other):
		return isinstance(other, UnionType) and other._key == self._key
	def __hash__(self): return hash(self._key)

def each_member(typ:LapisType) -> Iterator[LapisType]:
	yield from typ.members()

def merge(a:LapisType, b:LapisType) -> LapisType:
	if a == b: return a
	members = []
	for typ in (*a.members(), *b.members()):
		if typ not in members:
			members.append(typ)
	if len(members) == 1: return members[0]
	return UnionType(members)
