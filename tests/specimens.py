"""
Small constructors for building syntax trees by hand, since parsing is somebody else's job.
"""
from lapis import syntax
from lapis.ontology import Nom

def lit(value, spot=0):
	if isinstance(value, bool): return syntax.BoolLiteral(value, spot)
	if isinstance(value, int): return syntax.IntLiteral(value, spot)
	if isinstance(value, float): return syntax.FloatLiteral(value, spot)
	if isinstance(value, str): return syntax.StringLiteral(value, spot)
	raise TypeError(value)

def char(value): return syntax.CharLiteral(value)

def ref(name): return syntax.Reference(Nom(name))

def ivar(name): return syntax.InstanceVar(Nom(name))

def const(name): return syntax.Const(Nom(name))

def call(name, *args, obj=None, parens=False, spot=None):
	return syntax.Call(obj, Nom(name, spot), args, parens)

def new(name): return call("new", obj=const(name))

def assign(target, value):
	target = ivar(target) if target.startswith("@") else ref(target)
	return syntax.Assign(target, value)

def block(*statements): return syntax.Expressions(statements)

def method(name, params, *body):
	return syntax.Def(Nom(name), [syntax.Param(Nom(p)) for p in params], block(*body))

def klass(name, *body): return syntax.ClassDef(Nom(name), block(*body))

def cond(test, then_part, else_part=None):
	return syntax.If(test, then_part, else_part)

def loop(test, body): return syntax.While(test, body)
