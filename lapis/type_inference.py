"""
Demand-driven type inference.

The TypeVisitor walks the tree once. It seeds literal types and wires
variables, assignments and calls into the propagation graph. From then on,
every change of type ripples through the graph on the spot: a call whose
inputs all become known resolves itself, which may specialize a method,
which walks that method's body with a fresh TypeVisitor, and so on.

A call over union-typed inputs becomes a Dispatch: one concrete call per
combination of member types, with the results merged back together.
"""
from itertools import product
from typing import Optional, Sequence, Union

from boozetools.support.foundation import Visitor
from . import syntax
from .algebra import LapisType, ObjectType, each_member
from .diagnostics import (
	Report, InferenceError, UndefinedMethod, ArityMismatch, FrozenCallMismatch,
	UnknownConstant, MisplacedInstanceVariable, SpecializationFailure,
)
from .ontology import Nom
from .propagation import TypedNode, Reaction
from .scope import Module

def infer_type(node:syntax.Expression, report:Optional[Report]=None) -> Module:
	mod = Module(report)
	TypeVisitor(mod).visit(node)
	return mod

#######################################################################
# Call resolution

def recalculate(call:syntax.Call):
	if not call.can_calculate_type(): return

	mod = call.mod
	scope = call.obj.type if call.obj is not None else mod

	if call.has_unions():
		dispatch = _dispatch_for(call)
		dispatch.add_observer(call)
		call.target_def = dispatch
		return

	untyped_def = scope.lookup_def(call.name)

	_check_method_exists(call, untyped_def)
	_check_args_match(call, untyped_def)

	arg_types = call.arg_types()
	typed_def = untyped_def.lookup_instance(arg_types)
	if typed_def is None:
		_check_frozen(call, untyped_def, arg_types)
		typed_def = _specialize(call, untyped_def, scope, arg_types)

	typed_def.body.add_observer(call)
	call.target_def = typed_def

def _specialize(call:syntax.Call, untyped_def:syntax.Def, scope, arg_types:Sequence[LapisType]) -> syntax.Def:
	typed_def = untyped_def.clone()
	typed_def.owner = scope

	variables = {}
	if call.obj is not None:
		variables['self'] = syntax.Variable('self', call.obj.type)
	for param, typ in zip(typed_def.params, arg_types):
		variables[param.name] = syntax.Variable(param.name, typ)
		param.type = typ

	# Cache first: a recursive call with these same types must find this instance, not make another.
	untyped_def.add_instance(typed_def)

	call.mod.report.info("Specialize", _signature(call, arg_types))
	call.is_specializing_call = True
	try:
		TypeVisitor(call.mod, variables, scope).visit(typed_def.body)
	except InferenceError as ex:
		raise SpecializationFailure("instantiating '%s'" % call.name, call, ex) from ex
	finally:
		call.is_specializing_call = False
	return typed_def

def _signature(call:syntax.Call, arg_types:Sequence[LapisType]) -> str:
	owner = "%s#" % call.obj.type.name if call.obj is not None else ""
	return "%s%s(%s)" % (owner, call.name, ", ".join(t.name for t in arg_types))

def _check_method_exists(call:syntax.Call, untyped_def:Optional[syntax.Def]):
	if untyped_def is not None: return

	if call.obj is not None:
		message = "undefined method '%s' for %s" % (call.name, call.obj.type.name)
	elif call.args or call.has_parenthesis:
		message = "undefined method '%s'" % call.name
	else:
		message = "undefined local variable or method '%s'" % call.name
	raise UndefinedMethod(message, call)

def _check_args_match(call:syntax.Call, untyped_def:syntax.Def):
	if len(untyped_def.params) == len(call.args): return

	pattern = "wrong number of arguments for '%s' (%d for %d)"
	raise ArityMismatch(pattern % (call.name, len(call.args), len(untyped_def.params)), call)

def _check_frozen(call:syntax.Call, untyped_def:syntax.Def, arg_types:Sequence[LapisType]):
	if not isinstance(untyped_def, syntax.FrozenDef): return

	types = ", ".join(t.name for t in arg_types)
	if isinstance(untyped_def, syntax.External):
		message = "can't call %s with types [%s]" % (call.name, types)
	else:
		owner = call.obj.type if call.obj is not None else untyped_def.owner
		message = "can't call %s#%s with types [%s]" % (owner.name, call.name, types)
	raise FrozenCallMismatch(message, call)

def _dispatch_for(call:syntax.Call) -> "Dispatch":
	obj_type = call.obj.type if call.obj is not None else None
	arg_types = call.arg_types()
	# One per call site: the members carry the site's own name token into any diagnostics.
	key = call.nom, obj_type, arg_types
	try: return call.mod.dispatches[key]
	except KeyError: pass
	dispatch = call.mod.dispatches[key] = Dispatch(call.mod, call.nom, obj_type, arg_types, call.has_parenthesis)
	# Registered before expansion, so that the site coming back around to these same unions reuses it.
	dispatch.expand()
	return dispatch

#######################################################################
# Polymorphic dispatch

class Dispatch(TypedNode):
	"""
	Stands for "one of several concrete calls".
	The type is the merge of all the member calls' result types.
	"""
	calls: dict[tuple, syntax.Call]

	def __init__(self, mod:Module, nom:Nom, obj:Optional[LapisType], args:Sequence[LapisType], has_parenthesis:bool=False):
		self.mod, self.nom = mod, nom
		self.obj = obj
		self.args = tuple(args)
		self.has_parenthesis = has_parenthesis
		self.calls = {}

	@property
	def name(self) -> str: return self.nom.text
	def __repr__(self): return "<dispatch %s over %d>" % (self.nom.text, len(self.calls))

	def expand(self):
		self.mod.report.info("Dispatch", self.name, "over", self.obj, list(self.args))
		for obj_type, *arg_types in product(self._each_obj(), *map(each_member, self.args)):
			obj = None if obj_type is None else syntax.Variable('self', obj_type)
			args = [syntax.Variable(None, t) for t in arg_types]
			call = syntax.Call(obj, self.nom, args, self.has_parenthesis)
			call.mod = self.mod
			self.calls[(obj_type, *arg_types)] = call
			call.add_observer(self)
			call.recalculate()

	def _each_obj(self):
		if self.obj is None: return [None]
		return list(each_member(self.obj))

#######################################################################
# The tree walk

class TypeVisitor(Visitor):
	"""
	One walk over a tree: the program at large, or the body of a freshly-specialized method.
	The scope is the ObjectType (or the module) against which instance variables
	and self-instantiation make sense.
	"""
	mod: Module
	_vars: dict[str, syntax.Variable]
	_scope: Union[ObjectType, Module, None]
	_class: Optional[ObjectType]

	def __init__(self, mod:Module, variables:Optional[dict]=None, scope=None):
		self.mod = mod
		self._vars = {} if variables is None else variables
		self._scope = scope
		self._class = None

	def visit_BoolLiteral(self, node:syntax.BoolLiteral): node.type = self.mod.bool
	def visit_IntLiteral(self, node:syntax.IntLiteral): node.type = self.mod.int
	def visit_FloatLiteral(self, node:syntax.FloatLiteral): node.type = self.mod.float
	def visit_CharLiteral(self, node:syntax.CharLiteral): node.type = self.mod.char
	def visit_StringLiteral(self, node:syntax.StringLiteral): node.type = self.mod.string

	def visit_Def(self, node:syntax.Def):
		# Bodies get checked only when specialized.
		if self._class is not None:
			self._class.defs[node.name] = node
		else:
			self.mod.defs[node.name] = node

	def visit_ClassDef(self, node:syntax.ClassDef):
		if node.name not in self.mod.types:
			self.mod.types[node.name] = ObjectType(node.name)
		outer, self._class = self._class, self.mod.types[node.name]
		try: self.visit(node.body)
		finally: self._class = outer

	def visit_Reference(self, node:syntax.Reference):
		self.lookup_var(node.name).add_observer(node)

	def visit_InstanceVar(self, node:syntax.InstanceVar):
		self.lookup_instance_var(node).add_observer(node)

	def visit_Const(self, node:syntax.Const):
		# A class name only means something as the receiver of "new".
		pass

	def visit_Assign(self, node:syntax.Assign):
		self.visit(node.value)
		node.value.add_observer(node)

		if isinstance(node.target, syntax.InstanceVar):
			var = self.lookup_instance_var(node.target)
		else:
			var = self.lookup_var(node.target.name)
		node.add_observer(var)
		var.add_observer(node.target)

	def visit_Expressions(self, node:syntax.Expressions):
		for statement in node.body:
			self.visit(statement)
		if node.body:
			node.last().add_observer(node)
		else:
			node.type = self.mod.void

	def visit_While(self, node:syntax.While):
		self.visit(node.cond)
		self.visit(node.body)
		node.type = self.mod.void

	def visit_If(self, node:syntax.If):
		self.visit(node.cond)
		self.visit(node.then_part)
		if node.else_part is not None:
			self.visit(node.else_part)
		node.then_part.add_observer(node)
		if node.has_else():
			node.else_part.add_observer(node)

	def visit_Call(self, node:syntax.Call):
		if isinstance(node.obj, syntax.Const) and node.name == 'new':
			return self._instantiate(node)

		node.mod = self.mod
		for arg in node.args:
			arg.add_observer(node, Reaction.RESOLVE)
		if node.obj is not None:
			node.obj.add_observer(node, Reaction.RESOLVE)
		else:
			if not node.args: node.recalculate()

		if node.obj is not None:
			self.visit(node.obj)
		for arg in node.args:
			self.visit(arg)

	def _instantiate(self, node:syntax.Call):
		name = node.obj.name
		if isinstance(self._scope, ObjectType) and self._scope.name == name:
			# A class making one of itself: the same type, or this would never end.
			node.type = self._scope
		else:
			try: typ = self.mod.types[name]
			except KeyError:
				raise UnknownConstant("uninitialized constant %s" % name, node.obj)
			node.type = typ.clone()
		node.is_new_type = True

	def lookup_var(self, name:str) -> syntax.Variable:
		try: return self._vars[name]
		except KeyError:
			var = self._vars[name] = syntax.Variable(name)
			return var

	def lookup_instance_var(self, node:syntax.InstanceVar) -> syntax.Variable:
		if not isinstance(self._scope, ObjectType):
			raise MisplacedInstanceVariable("can't use instance variables outside a class's methods", node)
		instance_vars = self._scope.instance_vars
		try: return instance_vars[node.name]
		except KeyError:
			var = instance_vars[node.name] = syntax.Variable(node.name)
			return var
