"""
The module is the top-level scope: it knows the classes by name,
the top-level methods by name, and the primitive types.
It is also what a single inference run hands back.
"""
from typing import Optional
from . import primitive
from .algebra import PrimitiveType, ObjectType
from .diagnostics import Report
from .propagation import TypedNode
from .syntax import Def

class Module:
	name = "main"
	bool: PrimitiveType
	int: PrimitiveType
	float: PrimitiveType
	char: PrimitiveType
	string: PrimitiveType
	void: PrimitiveType

	def __init__(self, report:Optional[Report]=None):
		self.report = report or Report(verbose=0)
		self.types: dict[str, ObjectType] = {}
		self.defs: dict[str, Def] = {}
		# Dispatch nodes by (call-site name token, receiver type, argument types),
		# so that a site resolving again over the same unions keeps its expansion.
		self.dispatches: dict[tuple, TypedNode] = {}
		primitive.install(self)

	def __repr__(self): return "<module %s>" % self.name

	def lookup_def(self, name:str) -> Optional[Def]:
		return self.defs.get(name)
