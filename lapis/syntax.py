"""
The set of parse-nodes in simple form.
Whatever parses the program calls these constructors bottom-up.
Class-level type annotations make peace with the IDE wherever the inference pass adds fields.

Every expression is also a TypedNode, so it takes part in the propagation graph.
"""
import copy
from typing import Optional, Sequence, Union
from .algebra import LapisType
from .ontology import Phrase, Nom
from .propagation import TypedNode

class Expression(TypedNode, Phrase):
	pass

class Literal(Expression):
	def __init__(self, value, spot:int=0):
		self.value, self.spot = value, spot
	def __repr__(self): return "<%s %r>" % (type(self).__name__, self.value)
	def left(self): return self.spot
	def right(self): return self.spot

class BoolLiteral(Literal): pass
class IntLiteral(Literal): pass
class FloatLiteral(Literal): pass
class CharLiteral(Literal): pass
class StringLiteral(Literal): pass

class Variable(TypedNode):
	"""
	A named slot: local, instance field, or synthesized parameter.
	It is not part of the tree, so it is not a Phrase.
	"""
	def __init__(self, name:Optional[str], typ:Optional[LapisType]=None):
		self.name = name
		self.type = typ
	def __repr__(self): return "<var %s:%s>" % (self.name, self.type)
	def clone(self) -> "Variable": return Variable(self.name, self.type)

class Reference(Expression):
	""" A bare name, which may refer to a local variable """
	def __init__(self, nom:Nom): self.nom = nom
	@property
	def name(self) -> str: return self.nom.text
	def __repr__(self): return "<ref:%s>" % self.nom.text
	def left(self): return self.nom.left()
	def right(self): return self.nom.right()

class InstanceVar(Reference):
	def __repr__(self): return "<@%s>" % self.nom.text

class Const(Reference):
	""" The name of a class, as used in `Name.new` """
	def __repr__(self): return "<const:%s>" % self.nom.text

class Assign(Expression):
	def __init__(self, target:Reference, value:Expression):
		assert isinstance(target, Reference) and not isinstance(target, Const)
		self.target, self.value = target, value
	def left(self): return self.target.left()
	def right(self): return self.value.right()

class Expressions(Expression):
	""" A sequence of statements, valued as the last. """
	def __init__(self, body:Sequence[Expression]=()):
		self.body = list(body)
	def last(self) -> Optional[Expression]:
		return self.body[-1] if self.body else None
	def left(self): return self.body[0].left() if self.body else 0
	def right(self): return self.body[-1].right() if self.body else 0

class While(Expression):
	def __init__(self, cond:Expression, body:Expressions):
		self.cond, self.body = cond, body
	def left(self): return self.cond.left()
	def right(self): return self.body.right() or self.cond.right()

class If(Expression):
	def __init__(self, cond:Expression, then_part:Expressions, else_part:Optional[Expressions]=None):
		self.cond, self.then_part, self.else_part = cond, then_part, else_part
	def has_else(self) -> bool:
		if self.else_part is None: return False
		if isinstance(self.else_part, Expressions): return bool(self.else_part.body)
		return True
	def left(self): return self.cond.left()
	def right(self):
		part = self.else_part if self.has_else() else self.then_part
		return part.right() or self.cond.right()

class Call(Expression):
	obj: Optional[TypedNode]
	args: list[TypedNode]
	target_def: Union["Def", TypedNode, None] = None  # A Dispatch is a TypedNode.
	mod = None  # The inference pass fills this in.

	def __init__(self, obj:Optional[TypedNode], nom:Nom, args:Sequence[TypedNode]=(), has_parenthesis:bool=False):
		self.obj, self.nom, self.args = obj, nom, list(args)
		self.has_parenthesis = has_parenthesis
	@property
	def name(self) -> str: return self.nom.text
	def __repr__(self): return "<call %s/%d>" % (self.nom.text, len(self.args))
	def left(self):
		return self.obj.left() if isinstance(self.obj, Phrase) else self.nom.left()
	def right(self):
		last = self.args[-1] if self.args else None
		return last.right() if isinstance(last, Phrase) else self.nom.right()

	def arg_types(self) -> tuple[LapisType, ...]:
		return tuple(a.type for a in self.args)

	def can_calculate_type(self) -> bool:
		return all(a.type is not None for a in self.args) and (self.obj is None or self.obj.type is not None)

	def has_unions(self) -> bool:
		return any(len(t.members()) > 1 for t in self.input_types())

	def input_types(self):
		if self.obj is not None: yield self.obj.type
		yield from self.arg_types()

	def update_input(self, typ:LapisType):
		self.recalculate()

	def recalculate(self):
		# Resolution needs the inference driver, which needs the syntax.
		from .type_inference import recalculate
		recalculate(self)

class Param(TypedNode, Phrase):
	def __init__(self, nom:Nom): self.nom = nom
	@property
	def name(self) -> str: return self.nom.text
	def __repr__(self): return "<:%s:%s>" % (self.nom.text, self.type)
	def left(self): return self.nom.left()
	def right(self): return self.nom.right()

class NativeBody(TypedNode):
	""" Stands in for the body of a built-in method: it just has the result type. """
	def __init__(self, typ:LapisType): self.type = typ
	def __repr__(self): return "<native:%s>" % self.type

class Def(Expression):
	"""
	A method definition. The one in the tree is never typed itself;
	each distinct tuple of argument types gets its own specialized copy,
	kept in the instances cache of the original.
	"""
	owner: Optional[LapisType] = None
	instances: Optional[dict[tuple, "Def"]] = None

	def __init__(self, nom:Nom, params:Sequence[Param], body:Optional[TypedNode]):
		self.nom, self.params, self.body = nom, list(params), body
	@property
	def name(self) -> str: return self.nom.text
	def __repr__(self): return "<def %s/%d>" % (self.nom.text, len(self.params))
	def left(self): return self.nom.left()
	def right(self):
		end = self.body.right() if isinstance(self.body, Phrase) else 0
		return end or self.nom.right()

	def clone(self) -> "Def":
		""" A fresh unspecialized copy, sharing nothing mutable with this one. """
		return Def(self.nom, [Param(p.nom) for p in self.params], copy.deepcopy(self.body))

	def add_instance(self, a_def:"Def"):
		# Keyed by argument types alone. Receivers of the same class share the one instance.
		if self.instances is None:
			self.instances = {}
		self.instances[tuple(p.type for p in a_def.params)] = a_def

	def lookup_instance(self, arg_types:Sequence[LapisType]) -> Optional["Def"]:
		if self.instances is None: return None
		return self.instances.get(tuple(arg_types))

class FrozenDef(Def):
	""" A method with no body to infer. The native signatures are all the instances it will ever have. """
	def __init__(self, nom:Nom, params:Sequence[Param], owner:Optional[LapisType]=None):
		super().__init__(nom, params, None)
		self.owner = owner

	def add_native(self, arg_types:Sequence[LapisType], result:LapisType):
		assert len(arg_types) == len(self.params)
		typed_def = Def(self.nom, [Param(p.nom) for p in self.params], NativeBody(result))
		typed_def.owner = self.owner
		for param, typ in zip(typed_def.params, arg_types):
			param.type = typ
		self.add_instance(typed_def)

class External(FrozenDef):
	""" A built-in with no receiver. """
	pass

class ClassDef(Expression):
	def __init__(self, nom:Nom, body:Expressions):
		self.nom, self.body = nom, body
	@property
	def name(self) -> str: return self.nom.text
	def left(self): return self.nom.left()
	def right(self): return self.body.right() or self.nom.right()
