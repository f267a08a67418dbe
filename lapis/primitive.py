"""
Build the primitive types and their native methods.
Every module gets its own set, installed as attributes of the module.
"""

from .algebra import PrimitiveType
from .ontology import Nom
from .syntax import FrozenDef, External, Param

PRIMITIVE_NAMES = {
	"bool": "Bool",
	"int": "Int",
	"float": "Float",
	"char": "Char",
	"string": "String",
	"void": "Void",
}

def _params(arity:int) -> list[Param]:
	return [Param(Nom("arg%d" % i, None)) for i in range(arity)]

def _native(owner:PrimitiveType, name:str, *signatures):
	""" Each signature is a pair: (argument types, result type). """
	arity = len(signatures[0][0])
	dfn = FrozenDef(Nom(name, None), _params(arity), owner)
	for arg_types, result in signatures:
		dfn.add_native(arg_types, result)
	owner.defs[name] = dfn
	return dfn

def install(mod):
	for attribute, name in PRIMITIVE_NAMES.items():
		setattr(mod, attribute, PrimitiveType(name))

	for number in mod.int, mod.float:
		for op in "+ - * /".split():
			_native(number, op, ((mod.int,), number), ((mod.float,), mod.float))
		for op in "< <= > >=".split():
			_native(number, op, ((mod.int,), mod.bool), ((mod.float,), mod.bool))

	for typ in mod.bool, mod.int, mod.float, mod.char, mod.string:
		_native(typ, "==", ((typ,), mod.bool))

	_native(mod.bool, "!", ((), mod.bool))
	_native(mod.char, "ord", ((), mod.int))
	_native(mod.string, "length", ((), mod.int))
	_native(mod.string, "+", ((mod.string,), mod.string))

	puts = External(Nom("puts", None), _params(1))
	for typ in mod.bool, mod.int, mod.float, mod.char, mod.string:
		puts.add_native((typ,), mod.void)
	mod.defs["puts"] = puts
